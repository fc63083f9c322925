"""
Unit tests for ParameterSet: role selection, the option namespace and
the all-or-nothing registration scope.
"""

import pytest

from collage_toolkit.builder.components import ComponentRole, PositionCalculator
from collage_toolkit.builder.parameters import ParameterSet
from collage_toolkit.core.errors import ParseParameterError, RegistrationError
from collage_toolkit.core.models import parse_geometry


class _Positioner(PositionCalculator):
    """Minimal position calculator used as an option owner."""

    variant = "Stub"

    def position(self, records, params):
        return None


class _OtherPositioner(_Positioner):
    variant = "OtherStub"


class TestRoleSelection:
    """Tests for select()/validate_selection()."""

    def test_validate_when_roles_missing_then_raises_parse_parameter_error(self):
        """Every role must be filled before parsing."""
        params = ParameterSet()
        params.select(_Positioner())

        with pytest.raises(ParseParameterError, match="ProgressMonitor"):
            params.validate_selection()

    def test_validate_when_all_roles_selected_then_passes(self, registry):
        """A full selection validates."""
        params = ParameterSet()
        for key in (
            "ProgressMonitor_Silent",
            "InputImageReader_Raster",
            "DimensionInitializer_Native",
            "PositionCalculator_TileInOrder",
            "CollageRenderer_SVG",
        ):
            params.select(registry.get(key))

        params.validate_selection()
        assert params.position_calculator.key == "PositionCalculator_TileInOrder"

    def test_selected_components_when_selected_out_of_order_then_parse_order(self, registry):
        """selected_components follows monitor, reader, initializer, calculator, renderer."""
        params = ParameterSet()
        params.select(registry.get("CollageRenderer_PDF"))
        params.select(registry.get("PositionCalculator_Random"))
        params.select(registry.get("ProgressMonitor_Log"))

        roles = [c.role for c in params.selected_components]

        assert roles == [
            ComponentRole.PROGRESS_MONITOR,
            ComponentRole.POSITION_CALCULATOR,
            ComponentRole.COLLAGE_RENDERER,
        ]

    def test_select_when_same_role_twice_then_replaced(self):
        """Selecting again replaces the component in that role."""
        params = ParameterSet()
        first, second = _Positioner(), _OtherPositioner()

        params.select(first)
        params.select(second)

        assert params.selected(ComponentRole.POSITION_CALCULATOR) is second

    def test_selected_when_role_empty_then_raises_parse_parameter_error(self):
        """Accessing an empty role fails explicitly."""
        with pytest.raises(ParseParameterError):
            ParameterSet().collage_renderer


class TestOptionNamespace:
    """Tests for declare_option()/option_value()."""

    def test_declare_when_valid_then_listed(self):
        """Declared options are listed with their owner."""
        params = ParameterSet()
        owner = _Positioner()

        spec = params.declare_option(owner, "stub-size", default="3", help="Size")

        assert spec.flag == "--stub-size"
        assert spec.owner == "PositionCalculator_Stub"
        assert params.declared_options == (spec,)

    def test_declare_when_name_taken_then_raises_registration_error(self):
        """Option names are globally unique."""
        params = ParameterSet()
        params.declare_option(_Positioner(), "shared")

        with pytest.raises(RegistrationError, match="already registered"):
            params.declare_option(_OtherPositioner(), "shared")

    @pytest.mark.parametrize("name", ["", "Upper", "has space", "-leading", "trailing-"])
    def test_declare_when_name_malformed_then_raises_registration_error(self, name):
        """Names must be lowercase dash-separated words."""
        with pytest.raises(RegistrationError, match="invalid option name"):
            ParameterSet().declare_option(_Positioner(), name)

    def test_option_value_when_unset_then_default(self):
        """Unset options fall back to their default."""
        params = ParameterSet()
        owner = _Positioner()
        params.declare_option(owner, "stub-size", default="3")

        assert params.option_value(owner, "stub-size") == "3"

        params.set_option_value("stub-size", "7")
        assert params.option_value(owner, "stub-size") == "7"

    def test_set_option_value_when_undeclared_then_raises_parse_parameter_error(self):
        """Values for unknown options are rejected."""
        with pytest.raises(ParseParameterError, match="Unknown option"):
            ParameterSet().set_option_value("nope", "1")

    def test_option_value_when_other_owner_then_raises_parse_parameter_error(self):
        """A component cannot read another component's option."""
        params = ParameterSet()
        params.declare_option(_Positioner(), "stub-size")

        with pytest.raises(ParseParameterError):
            params.option_value(_OtherPositioner(), "stub-size")


class TestRegistrationScope:
    """Tests for the all-or-nothing registration() context."""

    def test_registration_when_block_raises_then_declarations_discarded(self):
        """A failing registration leaves no partial declarations."""
        # Arrange
        params = ParameterSet()
        params.declare_option(_Positioner(), "kept")

        # Act
        with pytest.raises(RegistrationError):
            with params.registration():
                params.declare_option(_OtherPositioner(), "discarded")
                params.declare_option(_OtherPositioner(), "kept")

        # Assert
        assert [spec.name for spec in params.declared_options] == ["kept"]
        assert not params.registered

    def test_registration_when_block_succeeds_then_declarations_kept(self):
        """Successful registration keeps every declaration."""
        params = ParameterSet()

        with params.registration():
            params.declare_option(_Positioner(), "one")
            params.declare_option(_Positioner(), "two")

        assert len(params.declared_options) == 2
        assert params.registered


class TestCustomAreas:
    """Tests for per-component custom areas and constraints."""

    def test_custom_area_when_two_components_then_isolated(self):
        """Each component gets its own private dict."""
        params = ParameterSet()
        params.custom_area(_Positioner())["value"] = 1

        assert params.custom_area(_OtherPositioner()) == {}
        assert params.custom_area(_Positioner()) == {"value": 1}

    def test_constraints_when_fields_set_then_reflected(self):
        """constraints bundles the declared canvas constraints."""
        params = ParameterSet()
        params.padding = parse_geometry("10x10")

        constraints = params.constraints

        assert constraints.padding == parse_geometry("10x10")
        assert constraints.aspect_ratio.is_unspecified
        assert constraints.max_size.is_unspecified
