"""
Compatibility rule engine.

Evaluates a drivetrain setup against the reference tables and reports
critical / warning / info issues. Rules run in a fixed order so the report
is deterministic:

1. Freehub fit
2. Rear derailleur capacity
3. Rear derailleur max cog size
4. Chain speed count and width
5. Cable pull and brand mixing
6. Chainline and bottom bracket
7. Front derailleur

The setup is compatible exactly when no rule raised a critical issue.
"""

import logging
from typing import Optional

from cranksmith.models.components import BikeType, ComponentKind
from cranksmith.models.outputs import CompatibilityCheck, CompatibilityWarning, Severity
from cranksmith.models.setup import DrivetrainSetup, validate_setup
from cranksmith.physics.geometry import resolve_chainline_geometry, standard_chain_line
from cranksmith.reference.chainline import (
    CHAINLINE_INFO_DEVIATION_MM,
    CHAINLINE_WARNING_DEVIATION_MM,
)
from cranksmith.reference.compatibility import (
    CABLE_PULL_MATCH_TOLERANCE_MM,
    CABLE_PULL_RATIOS_MM,
    CAPACITY_SAFETY_MARGIN,
    CHAIN_WIDTH_TOLERANCE_MM,
    CHAIN_WIDTHS,
    FREEHUB_NAMES,
    brand_pairing,
    cable_pull_key,
    freehub_fit,
)
from cranksmith.reference.tables import LookupResult

logger = logging.getLogger(__name__)


def implied_freehub(brand: str, speeds: int, bike_type: BikeType) -> Optional[str]:
    """
    Freehub body a wheel built for this derailleur would normally carry.

    Args:
        brand: Rear derailleur brand
        speeds: Rear derailleur speed count
        bike_type: Bike category (mtb vs drop-bar)

    Returns:
        Freehub type, or None for an unknown brand
    """
    brand = brand.lower()
    mtb = bike_type == BikeType.MTB
    if brand == "shimano":
        if speeds >= 12:
            return "shimano-12" if mtb else "shimano-11"
        return "shimano-11" if speeds == 11 else "standard-8-10"
    if brand == "sram":
        if speeds >= 12:
            return "sram-xd" if mtb else "sram-xdr"
        return "shimano-11" if speeds == 11 else "standard-8-10"
    if brand == "campagnolo":
        return "campagnolo-13" if speeds >= 13 else "campagnolo-11"
    return None


def _freehub_name(freehub: str) -> str:
    return FREEHUB_NAMES.get(freehub, freehub)


class CompatibilityEngine:
    """
    Runs every compatibility rule over one setup.

    Each call to run() starts a fresh report, so an engine can be reused.
    """

    def __init__(self, setup: DrivetrainSetup):
        """
        Initialize engine with a setup.

        Args:
            setup: Drivetrain setup to check
        """
        self.setup = setup
        self._warnings: list[CompatibilityWarning] = []
        self._notes: list[str] = []

    def run(self) -> CompatibilityCheck:
        """
        Evaluate all rules.

        Returns:
            CompatibilityCheck with warnings in rule order

        Raises:
            InvalidInputError: If the setup is malformed
        """
        validate_setup(self.setup)
        self._warnings = []
        self._notes = []

        self._check_freehub()
        self._check_capacity()
        self._check_max_cog()
        self._check_chain()
        self._check_cable_pull()
        self._check_chainline()
        self._check_front_derailleur()

        compatible = not any(w.severity == Severity.CRITICAL for w in self._warnings)
        logger.debug(
            "Compatibility: %d issue(s), compatible=%s",
            len(self._warnings),
            compatible,
        )
        return CompatibilityCheck(
            compatible=compatible,
            warnings=list(self._warnings),
            notes=list(self._notes),
        )

    def _add(
        self,
        severity: Severity,
        component: ComponentKind,
        issue: str,
        suggestion: Optional[str] = None,
    ) -> None:
        self._warnings.append(
            CompatibilityWarning(
                severity=severity,
                component=component,
                issue=issue,
                suggestion=suggestion,
            )
        )

    def _add_fallback(self, result: LookupResult, component: ComponentKind) -> None:
        self._add(Severity.INFO, component, result.describe())

    def _check_freehub(self) -> None:
        """Cassette splines must fit the wheel's freehub body."""
        setup = self.setup
        rd = setup.rear_derailleur
        cassette_freehub = setup.cassette.freehub_type.lower()

        if cassette_freehub not in FREEHUB_NAMES:
            self._add(
                Severity.INFO,
                ComponentKind.CASSETTE,
                f"Unknown freehub type '{cassette_freehub}', only an exact freehub match is accepted",
            )

        wheel_freehub = setup.wheel_freehub.lower() if setup.wheel_freehub else None
        if wheel_freehub is None:
            wheel_freehub = implied_freehub(rd.brand, rd.speeds, setup.bike_type)
            if wheel_freehub is None:
                self._add(
                    Severity.INFO,
                    ComponentKind.REAR_DERAILLEUR,
                    f"Unknown derailleur brand '{rd.brand}', assuming the wheel has a "
                    f"{_freehub_name(cassette_freehub)} freehub",
                )
                wheel_freehub = cassette_freehub

        fits, fitting_note = freehub_fit(wheel_freehub, cassette_freehub)
        if not fits:
            self._add(
                Severity.CRITICAL,
                ComponentKind.CASSETTE,
                f"Freehub mismatch: {_freehub_name(cassette_freehub)} cassette does not fit "
                f"a {_freehub_name(wheel_freehub)} freehub",
                f"Use a {_freehub_name(wheel_freehub)} cassette or change the freehub body",
            )
        elif fitting_note:
            self._notes.append(fitting_note)

        self._notes.append(f"Freehub type required: {_freehub_name(cassette_freehub)}")

    def _check_capacity(self) -> None:
        """Derailleur must wrap the front difference plus rear range."""
        rd = self.setup.rear_derailleur
        rings = self.setup.effective_chainrings
        low_cog, high_cog = self.setup.cassette.cog_range

        front_difference = max(rings) - min(rings)
        required = front_difference + (high_cog - low_cog)
        needed = required + CAPACITY_SAFETY_MARGIN

        if rd.total_capacity < needed:
            self._add(
                Severity.WARNING,
                ComponentKind.REAR_DERAILLEUR,
                f"Derailleur capacity {rd.total_capacity}T is {needed - rd.total_capacity}T short of "
                f"the {required}T required plus {CAPACITY_SAFETY_MARGIN}T margin",
                "Use a long cage derailleur (SGS/GS) or reduce gear range",
            )
        self._notes.append(
            f"Derailleur capacity: {required}T required, {rd.total_capacity}T available"
        )

    def _check_max_cog(self) -> None:
        """Largest cog must not exceed the derailleur's rating."""
        rd = self.setup.rear_derailleur
        largest = self.setup.cassette.cog_range[1]
        if largest > rd.max_cog_size:
            self._add(
                Severity.CRITICAL,
                ComponentKind.REAR_DERAILLEUR,
                f"Max cog size exceeded: {largest}T cog is larger than the derailleur's "
                f"{rd.max_cog_size}T maximum",
                "Use a smaller cassette or different derailleur model",
            )

    def _check_chain(self) -> None:
        """Speed counts must agree and chain width must suit its speed count."""
        setup = self.setup
        chain = setup.chain
        counts = [
            ("chain", chain.speeds),
            ("cassette", setup.cassette.speeds),
            ("rear derailleur", setup.rear_derailleur.speeds),
        ]
        if setup.front_derailleur is not None:
            counts.append(("front derailleur", setup.front_derailleur.speeds))

        if len({speeds for _, speeds in counts}) > 1:
            detail = ", ".join(f"{name} {speeds}-speed" for name, speeds in counts)
            self._add(
                Severity.CRITICAL,
                ComponentKind.CHAIN,
                f"Speed mismatch: {detail}",
                "Use a chain, cassette and derailleurs with the same speed count",
            )

        width = CHAIN_WIDTHS.lookup(chain.speeds)
        if width.fallback:
            self._add_fallback(width, ComponentKind.CHAIN)
            return

        nominal = width.value.internal_mm
        if round(abs(chain.internal_width_mm - nominal), 6) > CHAIN_WIDTH_TOLERANCE_MM:
            self._add(
                Severity.WARNING,
                ComponentKind.CHAIN,
                f"Chain internal width {chain.internal_width_mm}mm is outside "
                f"{nominal}±{CHAIN_WIDTH_TOLERANCE_MM}mm for {chain.speeds}-speed",
                f"Use a chain made for {chain.speeds}-speed drivetrains",
            )

    def _check_cable_pull(self) -> None:
        """Shifter and derailleur must agree on cable pull."""
        setup = self.setup
        rd = setup.rear_derailleur
        if rd.is_wireless:
            self._notes.append("Wireless rear derailleur: no shifter cable pull to match")
            return

        shifter = setup.get_shifter_brand().lower()
        derailleur = rd.brand.lower()
        if shifter == derailleur:
            return

        key = (shifter, cable_pull_key(rd.speeds, setup.bike_type.value))
        shifter_pull = CABLE_PULL_RATIOS_MM.lookup(key)
        if shifter_pull.fallback:
            self._add_fallback(shifter_pull, ComponentKind.DRIVETRAIN)

        pairing = brand_pairing(shifter, derailleur)
        pulls_match = abs(shifter_pull.value - rd.cable_pull_mm) <= CABLE_PULL_MATCH_TOLERANCE_MM
        if pairing and pulls_match:
            self._add(
                Severity.INFO,
                ComponentKind.REAR_DERAILLEUR,
                f"Mixed brands ({shifter} shifter, {derailleur} derailleur): {pairing}",
            )
            return

        self._add(
            Severity.CRITICAL,
            ComponentKind.REAR_DERAILLEUR,
            f"Cable pull mismatch: {shifter} shifter pulls {shifter_pull.value}mm per click but "
            f"the {derailleur} derailleur expects {rd.cable_pull_mm}mm",
            "Use a shifter from the same brand as the derailleur or a cable pull adapter",
        )

    def _check_chainline(self) -> None:
        """Compare the effective chainline with the bike type's standard."""
        setup = self.setup
        geometry = resolve_chainline_geometry(setup)

        standard = standard_chain_line(setup.bike_type)
        fallbacks = list(geometry.fallbacks)
        if standard.fallback and all(f.table != standard.table for f in fallbacks):
            fallbacks.append(standard)
        for result in fallbacks:
            self._add_fallback(result, ComponentKind.DRIVETRAIN)

        front = geometry.front_chain_line_mm
        deviation = abs(front - standard.value)
        message = (
            f"Chainline {front:.1f}mm is {deviation:.1f}mm from the {setup.bike_type.value} "
            f"standard of {standard.value:.1f}mm"
        )
        if deviation > CHAINLINE_WARNING_DEVIATION_MM:
            self._add(
                Severity.WARNING,
                ComponentKind.CRANKSET,
                f"{message}; expect heavy cross-chaining at one end of the cassette",
                "Check bottom bracket spacing or use a crankset with a matching chainline",
            )
        elif deviation > CHAINLINE_INFO_DEVIATION_MM:
            self._add(
                Severity.INFO,
                ComponentKind.CRANKSET,
                f"{message}; expect slightly more chain wear in the extreme gears",
            )
        self._notes.append(f"Chain line: {front:.1f}mm (standard {standard.value:.1f}mm)")

        bb = setup.bottom_bracket
        if not bb:
            return
        supported = [b.upper() for b in setup.crankset.bottom_brackets]
        if supported and bb.upper() not in supported:
            self._add(
                Severity.CRITICAL,
                ComponentKind.CRANKSET,
                f"Crankset does not support the {bb} bottom bracket "
                f"(supports {', '.join(setup.crankset.bottom_brackets)})",
                f"Use a {bb} compatible crankset or a bottom bracket adapter",
            )
        spec = geometry.bottom_bracket
        if spec is not None and all(f.table != "bottom bracket" for f in geometry.fallbacks):
            if spec.press_fit:
                self._notes.append(f"{bb} is press-fit: bearings press into a {spec.shell_width_mm}mm shell")
            else:
                self._notes.append(f"{bb} is threaded: {spec.shell_width_mm}mm shell")

    def _check_front_derailleur(self) -> None:
        """Front derailleur must handle the ring sizes and difference."""
        setup = self.setup
        fd = setup.front_derailleur
        if fd is None:
            rings = setup.declared_chainrings
            if len(rings) > 1:
                self._notes.append(
                    f"No front derailleur: only the {rings[0]}T chainring is used"
                )
            return

        rings = setup.effective_chainrings
        difference = max(rings) - min(rings)
        if difference > fd.max_chainring_diff:
            self._add(
                Severity.CRITICAL,
                ComponentKind.FRONT_DERAILLEUR,
                f"Chainring difference {difference}T exceeds the front derailleur's "
                f"{fd.max_chainring_diff}T limit",
                "Use closer chainrings or a front derailleur with more capacity",
            )
        if max(rings) > fd.max_chainring_size:
            self._add(
                Severity.WARNING,
                ComponentKind.FRONT_DERAILLEUR,
                f"Largest chainring {max(rings)}T is above the front derailleur's "
                f"{fd.max_chainring_size}T rating",
            )
        if fd.brand.lower() != setup.rear_derailleur.brand.lower():
            self._add(
                Severity.WARNING,
                ComponentKind.FRONT_DERAILLEUR,
                f"Front derailleur brand {fd.brand} differs from rear derailleur brand "
                f"{setup.rear_derailleur.brand}",
                "Check that the front shifter matches the front derailleur",
            )
        if len(rings) == 2:
            self._notes.append("2x setup: avoid big ring/big cog and small ring/small cog")


def check_compatibility(setup: DrivetrainSetup) -> CompatibilityCheck:
    """
    Check a drivetrain setup for mechanical compatibility.

    Args:
        setup: Drivetrain setup

    Returns:
        CompatibilityCheck; compatible is False exactly when a critical
        issue was found

    Raises:
        InvalidInputError: If the setup is malformed
    """
    return CompatibilityEngine(setup).run()
