"""
Tests for pydantic models.

Tests component validation, the component union, setup invariants and
settings loading.
"""

import json
import math

import pytest
from pydantic import ValidationError

from cranksmith.errors import InvalidInputError
from cranksmith.models.components import (
    BikeType,
    Cassette,
    ChainRing,
    ComponentKind,
    Crankset,
    component_adapter,
    component_kind,
    component_label,
)
from cranksmith.models.outputs import CompatibilityCheck, CompatibilityWarning, Severity
from cranksmith.models.settings import AnalysisSettings, SpeedUnit, load_settings
from cranksmith.models.setup import DrivetrainSetup, validate_setup


class TestComponents:
    """Tests for component models."""

    def test_cassette_cog_range(self, road_cassette):
        """Cog range is the smallest and largest cog."""
        assert road_cassette.cog_range == (11, 32)

    def test_zero_tooth_cog_rejected(self):
        """Cogs with zero teeth fail validation."""
        with pytest.raises(ValidationError):
            Cassette(
                id="bad",
                manufacturer="Test",
                model="Bad",
                speeds=2,
                cogs=[11, 0],
                freehub_type="shimano-11",
            )

    def test_negative_chainring_rejected(self):
        """Chainrings with negative teeth fail validation."""
        with pytest.raises(ValidationError):
            Crankset(
                id="bad",
                manufacturer="Test",
                model="Bad",
                chainrings=[-34],
                chain_line_mm=43.5,
                bcd_major_mm=110,
            )

    def test_empty_cassette_rejected(self):
        """A cassette needs at least one cog."""
        with pytest.raises(ValidationError):
            Cassette(
                id="bad",
                manufacturer="Test",
                model="Bad",
                speeds=11,
                cogs=[],
                freehub_type="shimano-11",
            )

    def test_components_are_immutable(self, road_cassette):
        """Components cannot be modified after creation."""
        with pytest.raises(ValidationError):
            road_cassette.speeds = 12

    def test_union_dispatches_on_component_type(self):
        """The component union picks the variant from component_type."""
        component = component_adapter.validate_python({
            "component_type": "chain",
            "id": "c",
            "manufacturer": "KMC",
            "model": "X11",
            "speeds": 11,
            "internal_width_mm": 5.65,
            "links": 118,
            "brand": "kmc",
        })
        assert component_kind(component) == ComponentKind.CHAIN

    def test_union_rejects_unknown_component_type(self):
        """Unknown component types are rejected by the union."""
        with pytest.raises(ValidationError):
            component_adapter.validate_python({
                "component_type": "saddle",
                "id": "s",
                "manufacturer": "Brooks",
                "model": "B17",
            })

    def test_component_kind_covers_every_variant(
        self, road_crankset, road_cassette, road_chain, road_derailleur, road_front_derailleur
    ):
        """Every variant maps to its own kind."""
        ring = ChainRing(id="r", manufacturer="Wolf Tooth", model="Drop-Stop", teeth=34, bcd_mm=104)
        kinds = {
            component_kind(c)
            for c in (road_crankset, road_cassette, road_chain, road_derailleur, road_front_derailleur, ring)
        }
        assert len(kinds) == 6
        assert ComponentKind.DRIVETRAIN not in kinds

    def test_component_kind_rejects_other_objects(self):
        """Non-component objects raise TypeError."""
        with pytest.raises(TypeError):
            component_kind("crankset")
        with pytest.raises(TypeError):
            component_label(42)

    def test_component_label(self, road_crankset, road_cassette):
        """Labels include the defining numbers."""
        assert component_label(road_crankset) == "Shimano 105 R7000 (50/34T)"
        assert component_label(road_cassette) == "Shimano 105 R7000 (11-32T, 11-speed)"


class TestDrivetrainSetup:
    """Tests for setup invariants."""

    def test_single_ring_without_front_derailleur(
        self, road_crankset, road_cassette, road_chain, road_derailleur
    ):
        """Without a front derailleur only the first declared ring is used."""
        setup = DrivetrainSetup(
            crankset=road_crankset,
            cassette=road_cassette,
            chain=road_chain,
            rear_derailleur=road_derailleur,
        )
        assert setup.effective_chainrings == [50]
        assert setup.is_single_ring

    def test_front_derailleur_uses_all_rings(self, road_setup):
        """With a front derailleur all rings are used in declared order."""
        assert road_setup.effective_chainrings == [50, 34]
        assert not road_setup.is_single_ring

    def test_front_derailleur_requires_two_rings(
        self, eagle_crankset, eagle_cassette, eagle_chain, eagle_derailleur, road_front_derailleur
    ):
        """A front derailleur on a single ring crankset is rejected."""
        with pytest.raises(ValidationError, match="at least two chainrings"):
            DrivetrainSetup(
                crankset=eagle_crankset,
                cassette=eagle_cassette,
                chain=eagle_chain,
                rear_derailleur=eagle_derailleur,
                front_derailleur=road_front_derailleur,
            )

    def test_aftermarket_rings_override_crankset(
        self, road_crankset, road_cassette, road_chain, road_derailleur, road_front_derailleur
    ):
        """Aftermarket chainrings replace the crankset's rings."""
        setup = DrivetrainSetup(
            crankset=road_crankset,
            cassette=road_cassette,
            chain=road_chain,
            rear_derailleur=road_derailleur,
            front_derailleur=road_front_derailleur,
            chainrings=[
                ChainRing(id="o", manufacturer="Praxis", model="Outer", teeth=52, bcd_mm=110),
                ChainRing(id="i", manufacturer="Praxis", model="Inner", teeth=36, bcd_mm=110),
            ],
        )
        assert setup.effective_chainrings == [52, 36]

    def test_shifter_brand_defaults_to_derailleur(self, road_setup):
        """Matched shifters are assumed when no shifter brand is given."""
        assert road_setup.get_shifter_brand() == "shimano"

    def test_crank_length_default(self, road_setup):
        """Crank length falls back to the given default."""
        assert road_setup.get_crank_length_mm(170.0) == 170.0

    def test_non_positive_hub_spacing_rejected(self, road_setup):
        """Hub spacing must be positive."""
        data = road_setup.model_dump()
        data["hub_spacing_mm"] = 0
        with pytest.raises(ValidationError):
            DrivetrainSetup(**data)

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_crank_length_rejected(self, road_setup, value):
        """Crank length must be a finite number."""
        data = road_setup.model_dump()
        data["crank_length_mm"] = value
        with pytest.raises(ValidationError):
            DrivetrainSetup(**data)

    @pytest.mark.parametrize("value", [math.inf, math.nan])
    def test_non_finite_crankset_chainline_rejected(self, road_crankset, value):
        """A crankset chainline must be a finite number."""
        data = road_crankset.model_dump()
        data["chain_line_mm"] = value
        with pytest.raises(ValidationError):
            Crankset(**data)

    def test_setup_round_trips_through_json(self, road_setup):
        """A dumped setup validates back to an equal setup."""
        restored = DrivetrainSetup(**json.loads(road_setup.model_dump_json()))
        assert restored == road_setup


class TestValidateSetup:
    """Tests for validate_setup on unvalidated setups."""

    def test_valid_setup_passes(self, road_setup):
        validate_setup(road_setup)

    def test_zero_tooth_cog(self, road_setup):
        """A zero tooth cog is invalid input."""
        bad_cassette = Cassette.model_construct(
            **{**road_setup.cassette.model_dump(), "cogs": [11, 0, 32]}
        )
        setup = road_setup.model_copy(update={"cassette": bad_cassette})
        with pytest.raises(InvalidInputError, match="cog teeth"):
            validate_setup(setup)

    def test_missing_component(self, road_setup):
        """A missing chain is invalid input."""
        setup = road_setup.model_copy(update={"chain": None})
        with pytest.raises(InvalidInputError, match="chain"):
            validate_setup(setup)

    def test_infinite_crankset_chainline(self, road_setup):
        """An unvalidated crankset with an infinite chainline is invalid input."""
        crankset = Crankset.model_construct(
            **{**road_setup.crankset.model_dump(), "chain_line_mm": math.inf}
        )
        setup = road_setup.model_copy(update={"crankset": crankset})
        with pytest.raises(InvalidInputError, match="crankset chainline"):
            validate_setup(setup)

    @pytest.mark.parametrize("value", [math.inf, math.nan])
    def test_non_finite_crank_length(self, road_setup, value):
        setup = road_setup.model_copy(update={"crank_length_mm": value})
        with pytest.raises(InvalidInputError, match="crank length"):
            validate_setup(setup)

    def test_infinite_hub_spacing(self, road_setup):
        setup = road_setup.model_copy(update={"hub_spacing_mm": math.inf})
        with pytest.raises(InvalidInputError, match="hub spacing"):
            validate_setup(setup)

    def test_invalid_input_is_value_error(self):
        """InvalidInputError is caught by ValueError handlers."""
        assert issubclass(InvalidInputError, ValueError)


class TestCompatibilityCheckModel:
    """Tests for the CompatibilityCheck verdict invariant."""

    def test_verdict_must_match_warnings(self):
        """A critical warning cannot be reported as compatible."""
        warning = CompatibilityWarning(
            severity=Severity.CRITICAL,
            component=ComponentKind.CHAIN,
            issue="Speed mismatch",
        )
        with pytest.raises(ValidationError):
            CompatibilityCheck(compatible=True, warnings=[warning])

    def test_warnings_do_not_affect_verdict(self):
        """Warning and info issues leave the setup compatible."""
        warnings = [
            CompatibilityWarning(severity=Severity.WARNING, component=ComponentKind.REAR_DERAILLEUR, issue="a"),
            CompatibilityWarning(severity=Severity.INFO, component=ComponentKind.DRIVETRAIN, issue="b"),
        ]
        check = CompatibilityCheck(compatible=True, warnings=warnings)
        assert not check.has_critical
        assert len(check.by_severity(Severity.INFO)) == 1


class TestSettings:
    """Tests for analysis settings."""

    def test_defaults(self):
        settings = AnalysisSettings()
        assert settings.speed_unit == SpeedUnit.KMH
        assert settings.default_crank_length_mm == 172.5
        assert settings.recommended_min_step_pct == 5.0

    def test_load_settings(self, tmp_path):
        """Settings load from a JSON file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"speed_unit": "mph", "ratio_decimals": 3}))
        settings = load_settings(path)
        assert settings.speed_unit == SpeedUnit.MPH
        assert settings.ratio_decimals == 3

    def test_load_settings_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.json")

    def test_invalid_settings_rejected(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"default_crank_length_mm": 0}))
        with pytest.raises(ValidationError):
            load_settings(path)

    def test_infinite_crank_length_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisSettings(default_crank_length_mm=math.inf)

    def test_bike_type_values(self):
        assert {bt.value for bt in BikeType} == {"road", "mtb", "gravel", "bmx", "hybrid"}
