"""Tests for the form state store."""

import pytest

from luxia_studio.models.field_schema import FieldKind, FieldSchema, ServiceDefinition, ServiceKind
from luxia_studio.models.form_state import (
    FieldChanged,
    FileHandle,
    FormStore,
    OptionToggled,
    apply_event,
    initialize,
    is_empty,
    set_field,
)


class TestInitialize:
    """Tests for form state initialization."""

    def test_one_entry_per_field(self, style_service):
        """Test every field has exactly one entry."""
        state = initialize(style_service)
        assert list(state) == style_service.field_names
        assert len(state) == len(style_service.fields)

    def test_checkbox_group_starts_empty(self, style_service):
        """Test checkbox groups start with an empty selection, not None."""
        state = initialize(style_service)
        assert state["Effets"] == ()

    def test_other_kinds_start_none(self, style_service):
        """Test fields without default start as None."""
        state = initialize(style_service)
        assert state["Style"] is None
        assert state["Nombre"] is None
        assert state["Champ de description"] is None

    def test_defaults_are_used(self):
        """Test declared defaults initialize the state."""
        service = ServiceDefinition(
            service_name=ServiceKind.VEO_VIDEO.value,
            fields=[
                FieldSchema(name="Durée", kind=FieldKind.NUMBER, default=8, max=8),
                FieldSchema(name="Style", kind=FieldKind.DROPDOWN, options=["A", "B"], default="B"),
                FieldSchema(name="Caméra", kind=FieldKind.CHECKBOX_GROUP, options=["X", "Y"], default=["Y"]),
            ],
        )
        state = initialize(service)
        assert state["Durée"] == 8
        assert state["Style"] == "B"
        assert state["Caméra"] == ("Y",)

    def test_idempotent(self, style_service):
        """Test the same schema always gives the same state."""
        assert initialize(style_service) == initialize(style_service)


class TestSetField:
    """Tests for set_field snapshots."""

    def test_replaces_one_entry(self, style_service):
        """Test only the targeted entry changes."""
        state = initialize(style_service)
        new_state = set_field(state, "Style", "Cinematic")
        assert new_state["Style"] == "Cinematic"
        for name in style_service.field_names:
            if name != "Style":
                assert new_state[name] == state[name]

    def test_previous_snapshot_unchanged(self, style_service):
        """Test older snapshots stay valid."""
        state = initialize(style_service)
        new_state = set_field(state, "Style", "Natural")
        assert state["Style"] is None
        assert new_state is not state

    def test_unknown_field(self, style_service):
        """Test unknown field names are refused."""
        state = initialize(style_service)
        with pytest.raises(KeyError):
            set_field(state, "Inconnu", "x")

    def test_lists_become_ordered_sets(self, style_service):
        """Test selections keep first-selection order without duplicates."""
        state = set_field(initialize(style_service), "Effets", ["Bokeh", "Grain", "Bokeh"])
        assert state["Effets"] == ("Bokeh", "Grain")

    def test_state_is_read_only(self, style_service):
        """Test the snapshot cannot be mutated in place."""
        state = initialize(style_service)
        with pytest.raises(TypeError):
            state["Style"] = "Cinematic"


class TestEvents:
    """Tests for form events."""

    def test_field_changed(self, style_service):
        """Test FieldChanged sets a value."""
        state = apply_event(initialize(style_service), FieldChanged("Nombre", 3))
        assert state["Nombre"] == 3

    def test_option_toggled_appends_in_selection_order(self, style_service):
        """Test toggled options are kept in selection order."""
        state = initialize(style_service)
        state = apply_event(state, OptionToggled("Effets", "Néon"))
        state = apply_event(state, OptionToggled("Effets", "Grain"))
        assert state["Effets"] == ("Néon", "Grain")

    def test_option_toggled_twice_removes(self, style_service):
        """Test toggling a selected option removes it."""
        state = initialize(style_service)
        state = apply_event(state, OptionToggled("Effets", "Grain"))
        state = apply_event(state, OptionToggled("Effets", "Bokeh"))
        state = apply_event(state, OptionToggled("Effets", "Grain"))
        assert state["Effets"] == ("Bokeh",)

    def test_option_toggled_on_scalar_field(self, style_service):
        """Test toggling an option of a non-selection field fails."""
        state = set_field(initialize(style_service), "Style", "Cinematic")
        with pytest.raises(TypeError):
            apply_event(state, OptionToggled("Style", "Natural"))


class TestFormStore:
    """Tests for the FormStore holder."""

    def test_dispatch_and_undo(self, style_service):
        """Test dispatching events and undoing the last one."""
        store = FormStore(style_service)
        store.dispatch(FieldChanged("Style", "Cinematic"))
        store.dispatch(FieldChanged("Style", "Natural"))
        assert store.state["Style"] == "Natural"
        store.undo()
        assert store.state["Style"] == "Cinematic"
        store.undo()
        assert store.state["Style"] is None
        assert not store.can_undo

    def test_reset_to_other_service(self, style_service, photo_service):
        """Test switching service starts from a fresh state."""
        store = FormStore(style_service)
        store.dispatch(FieldChanged("Style", "Cinematic"))
        state = store.reset(photo_service)
        assert list(state) == photo_service.field_names
        assert "Style" not in state
        assert not store.can_undo


class TestHelpers:
    """Tests for emptiness and file handles."""

    @pytest.mark.parametrize("value", [None, "", ()])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", ["a", ("x",), 0, 3])
    def test_non_empty_values(self, value):
        assert not is_empty(value)

    def test_file_handle_from_path(self, tmp_path):
        """Test reading a file handle from disk."""
        path = tmp_path / "ref.png"
        path.write_bytes(b"\x89PNG")
        handle = FileHandle.from_path(path)
        assert handle.name == "ref.png"
        assert handle.mime_type == "image/png"
        assert handle.size == 4
        assert not is_empty(handle)
