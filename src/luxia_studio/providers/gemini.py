"""Gemini image and Veo video capabilities."""

import asyncio
import itertools
import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from luxia_studio.capabilities import CapabilityRegistry, ProgressCallback
from luxia_studio.config import StudioConfig, get_config
from luxia_studio.errors import ProviderError
from luxia_studio.models.field_schema import ServiceKind
from luxia_studio.models.form_state import FileHandle
from luxia_studio.models.generation_result import GenerationResult, MediaKind

logger = logging.getLogger("luxia-studio")

VIDEO_PROGRESS_MESSAGES = (
    "Sending the request to the video model...",
    "The model is composing the scenes...",
    "Rendering frames...",
    "Adding the final touches...",
    "Almost there, the video is being finalized...",
)


class GeminiProvider:
    """Generates images with Gemini/Imagen and videos with Veo."""

    def __init__(
        self,
        api_key: str | None = None,
        client: genai.Client | None = None,
        config: StudioConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or get_config()
        self.api_key = api_key or self.config.gemini_api_key
        if client is None:
            if not self.api_key:
                raise ProviderError(message="GEMINI_API_KEY is not configured")
            client = genai.Client(api_key=self.api_key)
        self.client = client
        self._http_transport = http_transport

    async def generate_realistic_photo(
        self,
        prompt: str,
        file_input: FileHandle | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[GenerationResult]:
        """Restage the reference photo; one result per configured variant."""
        if file_input is None:
            raise ProviderError(message="A reference image is required for this service")
        _notify(on_progress, "Generating photo variations...")
        responses = await asyncio.gather(*(
            self._call(self._edit_image(prompt, file_input))
            for _ in range(max(1, self.config.image_variants))
        ))
        results = [result for response in responses for result in _image_parts(response)]
        if not results:
            raise ProviderError(message="No image was generated")
        return results

    async def generate_photoshop_image(
        self,
        prompt: str,
        file_input: FileHandle | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[GenerationResult]:
        """Edit the reference image when given, otherwise text-to-image with Imagen."""
        if file_input is not None:
            _notify(on_progress, "Editing the reference image...")
            response = await self._call(self._edit_image(prompt, file_input))
            results = _image_parts(response)
        else:
            _notify(on_progress, "Generating images...")
            response = await self._call(
                self.client.aio.models.generate_images(
                    model=self.config.imagen_model,
                    prompt=prompt,
                    config=types.GenerateImagesConfig(
                        number_of_images=max(1, self.config.image_variants),
                        output_mime_type="image/png",
                    ),
                )
            )
            results = [
                GenerationResult.from_bytes(MediaKind.IMAGE, generated.image.image_bytes, generated.image.mime_type)
                for generated in (response.generated_images or [])
                if generated.image and generated.image.image_bytes
            ]
        if not results:
            raise ProviderError(message="No image was generated")
        return results

    async def generate_veo_video(
        self,
        prompt: str,
        file_input: FileHandle | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[GenerationResult]:
        """Start a Veo operation and poll it until the video is ready."""
        messages = itertools.cycle(VIDEO_PROGRESS_MESSAGES)
        _notify(on_progress, next(messages))

        image = None
        if file_input is not None:
            image = types.Image(image_bytes=file_input.data, mime_type=file_input.mime_type)

        operation = await self._call(
            self.client.aio.models.generate_videos(
                model=self.config.video_model,
                prompt=prompt,
                image=image,
                config=types.GenerateVideosConfig(number_of_videos=1),
            )
        )
        while not operation.done:
            await asyncio.sleep(self.config.video_poll_seconds)
            _notify(on_progress, next(messages))
            operation = await self._call(self.client.aio.operations.get(operation))

        if operation.error:
            message = operation.error.get("message") if isinstance(operation.error, dict) else str(operation.error)
            raise ProviderError(message=message or "Video generation failed")

        generated = operation.response.generated_videos if operation.response else None
        if not generated:
            raise ProviderError(message="No video was generated")

        _notify(on_progress, "Downloading the video...")
        results = []
        for item in generated:
            video = item.video
            if video is None:
                continue
            if video.video_bytes:
                data = video.video_bytes
            elif video.uri:
                data = await self._download(video.uri)
            else:
                continue
            results.append(GenerationResult.from_bytes(MediaKind.VIDEO, data, video.mime_type or "video/mp4"))
        if not results:
            raise ProviderError(message="No video was generated")
        return results

    def _edit_image(self, prompt: str, file_input: FileHandle):
        return self.client.aio.models.generate_content(
            model=self.config.image_model,
            contents=[
                types.Part.from_bytes(data=file_input.data, mime_type=file_input.mime_type),
                prompt,
            ],
            config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
        )

    async def _call(self, awaitable):
        try:
            return await awaitable
        except genai_errors.APIError as e:
            logger.warning(f"Gemini API error: {e}")
            raise ProviderError(message=e.message or str(e)) from e

    async def _download(self, uri: str) -> bytes:
        headers = {"x-goog-api-key": self.api_key} if self.api_key else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.config.video_fetch_timeout,
                follow_redirects=True,
                transport=self._http_transport,
            ) as client:
                response = await client.get(uri, headers=headers)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise ProviderError(message=f"Could not download the generated video: {e}") from e


def _notify(on_progress: ProgressCallback | None, message: str) -> None:
    if on_progress is not None:
        on_progress(message)


def _image_parts(response) -> list[GenerationResult]:
    """Extract inline images from a generate_content response."""
    results = []
    for candidate in response.candidates or []:
        if candidate.content is None:
            continue
        for part in candidate.content.parts or []:
            inline = part.inline_data
            if inline and inline.data and (inline.mime_type or "").startswith("image/"):
                results.append(GenerationResult.from_bytes(MediaKind.IMAGE, inline.data, inline.mime_type))
    return results


def build_gemini_registry(api_key: str | None = None, **kwargs) -> CapabilityRegistry:
    """Registry serving every known service with one GeminiProvider."""
    provider = GeminiProvider(api_key=api_key, **kwargs)
    return CapabilityRegistry({
        ServiceKind.REALISTIC_PHOTO: provider.generate_realistic_photo,
        ServiceKind.PHOTOSHOP_IMAGE: provider.generate_photoshop_image,
        ServiceKind.VEO_VIDEO: provider.generate_veo_video,
    })
