"""
Age-Specific Modifiers

The same diagnosis presents differently across age groups: neonatal sepsis may
present with hypothermia rather than fever, MI in the elderly is often
painless, epiglottitis is rare after Hib vaccination.  Each modifier carries a
probability adjustment, presentation notes and treatment changes for one
(diagnosis, age group) pair.

Key format: ``<diagnosis_id>_<age_group>`` e.g. ``dka_child``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import List, Mapping, Optional, Protocol, Tuple

from .base import Differential, clamp_probability
from .vitals import AgeGroup, classify_age_group  # noqa: F401  (re-exported)


@dataclass(frozen=True)
class AgeModifier:
    condition_id: str
    age_group: AgeGroup
    probability_adjustment: float
    presentation_changes: Tuple[str, ...] = ()
    risk_factor_changes: Tuple[str, ...] = ()
    intervention_modifications: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.condition_id}_{self.age_group.value}"

    def to_dict(self) -> dict:
        return {
            "condition_id": self.condition_id,
            "age_group": self.age_group.value,
            "probability_adjustment": self.probability_adjustment,
            "presentation_changes": list(self.presentation_changes),
            "risk_factor_changes": list(self.risk_factor_changes),
            "intervention_modifications": list(self.intervention_modifications),
        }


_MODIFIERS = (
    # ── Septic shock ──────────────────────────────────────────────────────────
    AgeModifier(
        "septic_shock", AgeGroup.NEONATE, 0.2,
        presentation_changes=(
            "Fever NOT required (hypothermia common: temp <36.5°C)",
            "Lethargy/poor feeding primary signs",
            "Apnea/bradycardia common",
            "Jaundice may be present",
            "Hypoglycemia common",
        ),
        risk_factor_changes=(
            "Maternal GBS colonization",
            "Prolonged rupture of membranes",
            "Maternal fever during labor",
            "Prematurity",
        ),
        intervention_modifications=(
            "Ampicillin + Gentamicin (NOT ceftriaxone in <28 days)",
            "Blood culture from two sites",
            "Lumbar puncture if stable",
        ),
    ),
    AgeModifier(
        "septic_shock", AgeGroup.ELDERLY, 0.15,
        presentation_changes=(
            "Fever may be absent or blunted",
            "Confusion/altered mental status primary sign",
            "Hypothermia more common than fever",
            "Tachypnea may be only vital sign abnormality",
        ),
        risk_factor_changes=(
            "Immunosenescence",
            "Multiple comorbidities",
            "Polypharmacy",
            "Institutionalization",
        ),
        intervention_modifications=(
            "Renal dose adjustment for antibiotics",
            "Avoid nephrotoxic agents if possible",
            "Lower fluid bolus volumes (10 ml/kg, reassess)",
        ),
    ),

    # ── Myocardial infarction ─────────────────────────────────────────────────
    AgeModifier(
        "myocardial_infarction", AgeGroup.ELDERLY, 0.25,
        presentation_changes=(
            "Chest pain may be ABSENT (silent MI in 30-40%)",
            "Dyspnea primary symptom",
            "Confusion/altered mental status",
            "Syncope",
            "Nausea/vomiting without chest pain",
        ),
        risk_factor_changes=(
            "Diabetes (neuropathy → silent MI)",
            "Previous MI",
            "Heart failure",
        ),
        intervention_modifications=(
            "Aspirin dose same (162-325 mg)",
            "Caution with thrombolytics (bleeding risk)",
            "Consider primary PCI over thrombolysis",
        ),
    ),
    AgeModifier(
        "myocardial_infarction", AgeGroup.PREGNANT, -0.3,
        presentation_changes=(
            "Chest pain may be attributed to GERD/musculoskeletal",
            "Dyspnea may be attributed to pregnancy",
        ),
        risk_factor_changes=(
            "Peripartum cardiomyopathy",
            "Preeclampsia/eclampsia",
            "Cocaine use",
        ),
        intervention_modifications=(
            "Aspirin safe in pregnancy",
            "Avoid ACE inhibitors (teratogenic)",
            "Thrombolytics: risk-benefit discussion",
            "Primary PCI preferred",
        ),
    ),

    # ── DKA ───────────────────────────────────────────────────────────────────
    AgeModifier(
        "dka", AgeGroup.PREGNANT, 0.2,
        presentation_changes=(
            "Lower glucose threshold: >200 mg/dL (11 mmol/L) vs >250 mg/dL",
            "Occurs at lower glucose due to accelerated starvation",
            "Vomiting may be attributed to hyperemesis gravidarum",
        ),
        risk_factor_changes=(
            "Gestational diabetes",
            "Beta-agonist tocolytics",
            "Corticosteroids for fetal lung maturity",
        ),
        intervention_modifications=(
            "More aggressive fluid resuscitation",
            "Insulin infusion same",
            "Monitor fetal heart rate",
            "Obstetric consultation",
        ),
    ),
    AgeModifier(
        "dka", AgeGroup.CHILD, 0.15,
        presentation_changes=(
            "Abdominal pain prominent (may mimic appendicitis)",
            "Kussmaul breathing",
            "Fruity breath odor",
        ),
        risk_factor_changes=(
            "New-onset type 1 diabetes (30-40% present in DKA)",
            "Insulin omission (adolescents)",
        ),
        intervention_modifications=(
            "CRITICAL: Cerebral edema risk (1-2%)",
            "Fluid resuscitation: 10 ml/kg bolus (NOT 20 ml/kg)",
            "Avoid rapid glucose correction",
            "Mannitol/hypertonic saline ready for cerebral edema",
        ),
    ),

    # ── Stroke ────────────────────────────────────────────────────────────────
    AgeModifier(
        "stroke", AgeGroup.CHILD, -0.4,
        presentation_changes=(
            "Seizures more common presentation",
            "Altered mental status",
            "Hemiparesis",
        ),
        risk_factor_changes=(
            "Sickle cell disease (most common cause)",
            "Congenital heart disease",
            "Moyamoya disease",
            "Arterial dissection (trauma)",
        ),
        intervention_modifications=(
            "tPA rarely used in children",
            "Sickle cell: exchange transfusion",
            "Neurology consultation",
        ),
    ),
    AgeModifier(
        "stroke", AgeGroup.PREGNANT, 0.15,
        presentation_changes=(
            "Headache may be attributed to preeclampsia",
            "Seizures may be attributed to eclampsia",
        ),
        risk_factor_changes=(
            "Preeclampsia/eclampsia",
            "Cerebral venous thrombosis",
            "Peripartum cardiomyopathy",
        ),
        intervention_modifications=(
            "tPA: risk-benefit discussion (pregnancy category C)",
            "Rule out eclampsia first",
            "Magnesium sulfate if eclampsia",
        ),
    ),

    # ── Pneumonia ─────────────────────────────────────────────────────────────
    AgeModifier(
        "pneumonia", AgeGroup.NEONATE, 0.2,
        presentation_changes=(
            "Tachypnea primary sign",
            "Grunting",
            "Nasal flaring",
            "Subcostal retractions",
            "Apnea",
        ),
        risk_factor_changes=("Group B Streptococcus", "E. coli", "Listeria"),
        intervention_modifications=("Ampicillin + Gentamicin", "Blood culture", "Chest X-ray"),
    ),
    AgeModifier(
        "pneumonia", AgeGroup.ELDERLY, 0.2,
        presentation_changes=(
            "Fever may be absent",
            "Confusion primary presentation",
            "Falls",
            "Functional decline",
        ),
        risk_factor_changes=("Aspiration common", "Immunosenescence", "Comorbidities"),
        intervention_modifications=(
            "Broader antibiotic coverage",
            "Aspiration coverage (anaerobes)",
            "Lower threshold for admission",
        ),
    ),

    # ── Anaphylaxis ───────────────────────────────────────────────────────────
    AgeModifier(
        "anaphylaxis", AgeGroup.CHILD, 0.1,
        presentation_changes=(
            "Abdominal pain prominent",
            "Vomiting",
            "Behavioral changes (sense of impending doom)",
        ),
        risk_factor_changes=(
            "Food allergies (peanuts, tree nuts, milk, eggs)",
            "Insect stings",
        ),
        intervention_modifications=(
            "Epinephrine 0.01 mg/kg IM (max 0.3 mg)",
            "Repeat every 5-15 minutes if needed",
        ),
    ),

    # ── Hyperkalemia ──────────────────────────────────────────────────────────
    AgeModifier(
        "hyperkalemia", AgeGroup.NEONATE, 0.15,
        presentation_changes=("Bradycardia", "Arrhythmias", "Muscle weakness"),
        risk_factor_changes=(
            "Prematurity",
            "Hemolysis",
            "Tissue breakdown",
            "Congenital adrenal hyperplasia",
        ),
        intervention_modifications=(
            "Calcium gluconate 100 mg/kg IV (1 ml/kg of 10%)",
            "Insulin + glucose",
            "Sodium bicarbonate if acidotic",
        ),
    ),
    AgeModifier(
        "hyperkalemia", AgeGroup.ELDERLY, 0.2,
        presentation_changes=("Weakness", "Arrhythmias"),
        risk_factor_changes=(
            "Chronic kidney disease",
            "ACE inhibitors/ARBs",
            "Potassium-sparing diuretics",
            "NSAIDs",
        ),
        intervention_modifications=(
            "Calcium gluconate 1 g IV",
            "Insulin + glucose (monitor for hypoglycemia)",
            "Dialysis if refractory",
        ),
    ),

    # ── Upper / lower airway infections ───────────────────────────────────────
    AgeModifier(
        "bronchiolitis", AgeGroup.INFANT, 0.3,
        presentation_changes=(
            "Wheezing",
            "Crackles",
            "Tachypnea",
            "Nasal flaring",
            "Retractions",
            "Feeding difficulty",
        ),
        risk_factor_changes=(
            "Age <2 years (peak 2-6 months)",
            "RSV season (winter)",
            "Prematurity",
            "Congenital heart disease",
        ),
        intervention_modifications=(
            "Supportive care (oxygen, hydration)",
            "NO bronchodilators (ineffective)",
            "NO steroids (ineffective)",
            "High-flow nasal cannula if severe",
        ),
    ),
    AgeModifier(
        "croup", AgeGroup.CHILD, 0.3,
        presentation_changes=(
            "Barky cough (seal-like)",
            "Stridor (inspiratory)",
            "Hoarse voice",
            "Worse at night",
        ),
        risk_factor_changes=("Age 6 months - 3 years", "Viral prodrome"),
        intervention_modifications=(
            "Dexamethasone 0.6 mg/kg PO/IM (single dose)",
            "Nebulized epinephrine if severe (0.5 ml/kg of 1:1000, max 5 ml)",
            "Cool mist (no evidence but traditional)",
        ),
    ),
    AgeModifier(
        "epiglottitis", AgeGroup.CHILD, -0.3,
        presentation_changes=(
            "Tripod positioning",
            "Drooling",
            "Toxic appearance",
            "Muffled voice",
            "High fever",
        ),
        risk_factor_changes=("Unvaccinated (Hib)",),
        intervention_modifications=(
            "DO NOT examine throat (may precipitate airway obstruction)",
            "Keep child calm",
            "Prepare for emergency airway",
            "Ceftriaxone after airway secured",
        ),
    ),
)

AGE_MODIFIERS: Mapping[str, AgeModifier] = MappingProxyType({m.key: m for m in _MODIFIERS})


# ── Lookup ────────────────────────────────────────────────────────────────────

def modifier_for(diagnosis_id: str, age_group: AgeGroup) -> Optional[AgeModifier]:
    return AGE_MODIFIERS.get(f"{diagnosis_id}_{age_group.value}")


def lookup(diagnosis_id: str, age_group: AgeGroup) -> List[str]:
    """Age-specific intervention modifications; empty when none are authored."""
    modifier = modifier_for(diagnosis_id, age_group)
    return list(modifier.intervention_modifications) if modifier else []


def adjust(differential: Differential, age_group: AgeGroup) -> Differential:
    """
    Apply the age modifier for this differential, if any.

    Returns a new Differential with the shifted (clamped) probability and the
    presentation notes appended to its evidence; the input is returned
    unchanged when no modifier exists.
    """
    modifier = modifier_for(differential.id, age_group)
    if modifier is None:
        return differential
    notes = tuple(f"[Age-specific] {change}" for change in modifier.presentation_changes)
    return replace(
        differential,
        probability=clamp_probability(differential.probability + modifier.probability_adjustment),
        evidence=differential.evidence + notes,
    )


class AgeModifierLookup(Protocol):
    """Anything that can adjust differentials and list treatment changes by age group."""

    def lookup(self, diagnosis_id: str, age_group: AgeGroup) -> List[str]: ...

    def adjust(self, differential: Differential, age_group: AgeGroup) -> Differential: ...


class StaticAgeModifiers:
    """Default lookup backed by the built-in AGE_MODIFIERS table."""

    def lookup(self, diagnosis_id: str, age_group: AgeGroup) -> List[str]:
        return lookup(diagnosis_id, age_group)

    def adjust(self, differential: Differential, age_group: AgeGroup) -> Differential:
        return adjust(differential, age_group)


DEFAULT_AGE_MODIFIERS = StaticAgeModifiers()
