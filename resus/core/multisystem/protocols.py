"""
Integrated Protocol Generator

When conditions overlap, treating each in isolation can cause harm: fluids
for sepsis worsen heart failure, insulin before fluids deepens shock in DKA.
Each catalogued overlap has one merged protocol registered here.

Adding a protocol:
    1. Add the DangerousOverlap to catalogue.DANGEROUS_OVERLAPS.
    2. Register a ProtocolTemplate under its integrated_protocol id below.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Sequence, Tuple, TYPE_CHECKING

from resus.core.interventions.base import Benefit, Dosing, Intervention, Risk, Tier, TimeWindow
from resus.core.reasoning.base import Differential
from resus.utils import get_logger
from .catalogue import DangerousOverlap

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProtocolTemplate:
    protocol_id: str
    intervention: Intervention
    priority_sequence: Tuple[str, ...] = ()
    extra_warnings: Tuple[str, ...] = ()
    conflict_resolutions: Tuple[str, ...] = ()


@dataclass
class IntegratedProtocol:
    interventions: List[Intervention] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    priority_sequence: List[str] = field(default_factory=list)
    conflict_resolutions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "interventions": [i.to_dict() for i in self.interventions],
            "warnings": list(self.warnings),
            "priority_sequence": list(self.priority_sequence),
            "conflict_resolutions": list(self.conflict_resolutions),
        }


def _merged(
    intervention_id: str,
    name: str,
    indication: str,
    steps: Tuple[str, ...],
    route: str = "IV",
    risk: Risk = Risk.HIGH,
    benefit: Benefit = Benefit.HIGH,
    window: TimeWindow = TimeWindow.MINUTES,
) -> Intervention:
    return Intervention(
        id=intervention_id,
        name=name,
        category=Tier.IMMEDIATE,
        indication=indication,
        risk_if_wrong=risk,
        benefit_if_right=benefit,
        time_window=window,
        dosing=Dosing("See protocol steps", route),
        monitoring=steps,
    )


_TEMPLATES = (
    ProtocolTemplate(
        protocol_id="eclampsia_stroke_protocol",
        intervention=_merged(
            "eclampsia_stroke_integrated",
            "Eclampsia + Stroke Integrated Protocol",
            "Overlapping eclampsia and stroke",
            (
                "1. Magnesium sulfate 4-6g IV over 15-20 min (eclampsia)",
                "2. Labetalol 10-20mg IV or hydralazine 5-10mg IV (BP control)",
                "3. URGENT neurology consult (stroke assessment)",
                "4. CT head (differentiate hemorrhagic vs ischemic)",
                "5. Continue magnesium maintenance 1-2g/hr",
                "6. Target BP <160/110 but >140/90 (avoid hypoperfusion)",
            ),
        ),
        priority_sequence=(
            "ABC stabilization", "Magnesium (eclampsia)", "BP control", "Neurology consult", "Imaging",
        ),
    ),
    ProtocolTemplate(
        protocol_id="sepsis_dka_protocol",
        intervention=_merged(
            "sepsis_dka_integrated",
            "Sepsis + DKA Integrated Protocol",
            "Overlapping sepsis and DKA",
            (
                "1. Normal saline 20 mL/kg bolus (shock resuscitation)",
                "2. Blood cultures + broad-spectrum antibiotics within 1 hour",
                "3. Insulin 0.1 units/kg/hr AFTER initial fluid bolus",
                "4. Repeat 10 mL/kg boluses until shock resolves",
                "5. Monitor glucose hourly, lactate, blood gas",
                "6. ICU admission",
            ),
        ),
        priority_sequence=(
            "ABC stabilization", "Fluids (shock)", "Antibiotics (sepsis)", "Insulin (DKA)", "ICU transfer",
        ),
        conflict_resolutions=("Fluids first (shock takes priority), then insulin (DKA)",),
    ),
    ProtocolTemplate(
        protocol_id="anaphylaxis_asthma_protocol",
        intervention=_merged(
            "anaphylaxis_asthma_integrated",
            "Anaphylaxis + Asthma Integrated Protocol",
            "Overlapping anaphylaxis and asthma",
            (
                "1. Epinephrine 0.01 mg/kg IM (max 0.5mg) - IMMEDIATE",
                "2. Albuterol nebulizer 2.5-5mg continuous",
                "3. Ipratropium nebulizer 0.5mg",
                "4. Methylprednisolone 1-2 mg/kg IV or prednisone 1-2 mg/kg PO",
                "5. H1 blocker: Diphenhydramine 1 mg/kg IV",
                "6. Repeat epinephrine q5-15min if no improvement",
            ),
            route="IM/Nebulized",
            window=TimeWindow.SECONDS,
        ),
        priority_sequence=(
            "Epinephrine (anaphylaxis)", "Bronchodilators (asthma)", "Steroids (both)", "Antihistamines",
        ),
    ),
    ProtocolTemplate(
        protocol_id="maternal_arrest_pph_protocol",
        intervention=_merged(
            "maternal_arrest_pph_integrated",
            "Maternal Cardiac Arrest + PPH Integrated Protocol",
            "Maternal cardiac arrest with postpartum hemorrhage",
            (
                "1. CPR with left uterine displacement (tilt table or manual)",
                "2. Activate massive transfusion protocol",
                "3. Tranexamic acid 1g IV over 10 min",
                "4. Uterotonic drugs (oxytocin, misoprostol, carboprost)",
                "5. Perimortem cesarean if >20 weeks + no ROSC in 4 minutes",
                "6. Treat reversible causes (5 Hs, 5 Ts + obstetric causes)",
            ),
            route="IV/IM",
            risk=Risk.CRITICAL,
            benefit=Benefit.LIFE_SAVING,
            window=TimeWindow.SECONDS,
        ),
        priority_sequence=(
            "CPR + left uterine displacement", "Massive transfusion", "Uterotonics",
            "Perimortem cesarean (if indicated)",
        ),
    ),
    ProtocolTemplate(
        protocol_id="heart_failure_pneumonia_protocol",
        intervention=_merged(
            "heart_failure_pneumonia_integrated",
            "Heart Failure + Pneumonia Integrated Protocol",
            "Heart failure with pneumonia",
            (
                "1. Oxygen to maintain SpO2 >92%",
                "2. Antibiotics (ceftriaxone + azithromycin)",
                "3. Furosemide 0.5-1 mg/kg IV (heart failure)",
                "4. CAUTIOUS fluid boluses 5-10 mL/kg (if shock)",
                "5. Monitor for crackles, JVD, hepatomegaly after each bolus",
                "6. Early vasopressor support if fluid intolerant",
            ),
        ),
        extra_warnings=(
            "CRITICAL: Fluids for sepsis may worsen heart failure. "
            "Use small boluses (5-10 mL/kg) and reassess frequently.",
        ),
        conflict_resolutions=(
            "Fluids vs diuretics: Use small boluses, monitor closely, early vasopressors if fluid intolerant",
        ),
    ),
    ProtocolTemplate(
        protocol_id="meningitis_septic_shock_protocol",
        intervention=_merged(
            "meningitis_septic_shock_integrated",
            "Meningitis + Septic Shock Integrated Protocol",
            "Meningitis with septic shock",
            (
                "1. Dexamethasone 0.15 mg/kg IV (before or with first antibiotic)",
                "2. Ceftriaxone 100 mg/kg IV (max 4g) + vancomycin 15 mg/kg IV",
                "3. Normal saline 20 mL/kg bolus (shock resuscitation)",
                "4. Repeat boluses until shock resolves",
                "5. Vasopressors if fluid-refractory shock",
                "6. Lumbar puncture AFTER stabilization (if safe)",
            ),
            risk=Risk.CRITICAL,
            benefit=Benefit.LIFE_SAVING,
        ),
        priority_sequence=(
            "ABC stabilization", "Steroids + antibiotics", "Fluids (shock)", "Vasopressors (if needed)",
            "LP (after stabilization)",
        ),
    ),
    ProtocolTemplate(
        protocol_id="triple_threat_protocol",
        intervention=_merged(
            "triple_threat_integrated",
            "DKA + Sepsis + Shock (Triple Threat) Protocol",
            "DKA with sepsis and shock",
            (
                "1. AGGRESSIVE fluid resuscitation: 20 mL/kg boluses until shock resolves",
                "2. Blood cultures + broad-spectrum antibiotics within 1 hour",
                "3. Insulin 0.1 units/kg/hr AFTER initial fluid resuscitation",
                "4. Correct electrolytes (K, Mg, Phos)",
                "5. Monitor glucose, lactate, blood gas hourly",
                "6. IMMEDIATE ICU admission - high mortality",
            ),
            risk=Risk.CRITICAL,
            benefit=Benefit.LIFE_SAVING,
        ),
        priority_sequence=(
            "ABC stabilization", "Aggressive fluids (shock)", "Antibiotics (sepsis)", "Insulin (DKA)",
            "ICU transfer",
        ),
        extra_warnings=(
            "CRITICAL: Triple threat (DKA + sepsis + shock) has very high mortality. "
            "Aggressive resuscitation + ICU admission mandatory.",
        ),
    ),
)

PROTOCOLS: Mapping[str, ProtocolTemplate] = MappingProxyType({t.protocol_id: t for t in _TEMPLATES})


def multi_condition_warning(count: int) -> str:
    return (
        f"Multiple life-threatening conditions detected ({count}). "
        "Treat all simultaneously with integrated protocol."
    )


def synthesize(
    overlapping: Sequence[Differential],
    dangerous: Sequence[DangerousOverlap],
    survey: "PrimarySurveyData",
) -> IntegratedProtocol:
    """
    Merge the registered protocols of every matched overlap.

    Catalogue warnings precede each protocol's own warnings.  The generic
    multi-condition warning is appended whenever two or more conditions
    overlap, matched or not.
    """
    protocol = IntegratedProtocol()

    for overlap in dangerous:
        protocol.warnings.extend(overlap.interactions)
        template = PROTOCOLS.get(overlap.integrated_protocol)
        if template is None:
            logger.warning(
                f"ProtocolGenerator: overlap '{overlap.name}' references unregistered "
                f"protocol '{overlap.integrated_protocol}'"
            )
            continue
        protocol.interventions.append(template.intervention)
        protocol.warnings.extend(template.extra_warnings)
        protocol.priority_sequence.extend(template.priority_sequence)
        protocol.conflict_resolutions.extend(template.conflict_resolutions)

    if len(overlapping) >= 2:
        protocol.warnings.append(multi_condition_warning(len(overlapping)))

    logger.info(
        f"ProtocolGenerator [{survey.patient_type}]: {len(protocol.interventions)} merged "
        f"intervention(s) for {len(overlapping)} overlapping condition(s)"
    )
    return protocol
