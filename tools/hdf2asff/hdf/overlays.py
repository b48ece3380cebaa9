"""
Overlay resolution

Several profiles may declare a control with the same id (an overlay). Text
rendering needs every layer of a control, while status counting needs exactly
one representative per id.
"""

from dataclasses import dataclass
from typing import Dict, List

from .models import Control, Evaluation, Profile


@dataclass(frozen=True)
class ControlLayer:
    """A control paired with the profile that declared it"""

    control: Control
    profile: Profile

    @property
    def profile_info(self) -> Dict[str, str]:
        return self.profile.provenance()


def resolve_layers(evaluation: Evaluation, control: Control) -> List[ControlLayer]:
    """All layers declaring ``control.id``, in profile order

    The first layer is authoritative for single-valued display fields.
    """
    if len(evaluation.profiles) == 1:
        return [ControlLayer(control, evaluation.primary_profile)]

    layers = [
        ControlLayer(candidate, profile)
        for profile in evaluation.profiles
        for candidate in profile.controls
        if candidate.id == control.id
    ]
    if not any(layer.control is control for layer in layers):
        owner = next(
            (p for p in evaluation.profiles if any(c is control for c in p.controls)),
            evaluation.primary_profile,
        )
        layers.append(ControlLayer(control, owner))
    return layers


def _merge_control(existing: Control, candidate: Control) -> Control:
    """A later layer with executed results replaces the stored one"""
    if candidate.status_list:
        return candidate
    return existing


def resolve_canonical_controls(evaluation: Evaluation) -> List[Control]:
    """One representative control per id across all profiles"""
    canonical: Dict[str, Control] = {}
    for profile in evaluation.profiles:
        for control in profile.controls:
            if control.id in canonical:
                canonical[control.id] = _merge_control(canonical[control.id], control)
            else:
                canonical[control.id] = control
    return list(canonical.values())
