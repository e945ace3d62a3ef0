"""
Multi-System Catalogues

Static tables shared by the overlap detector, the integrated protocol
generator and the prioritizer.  Everything here is immutable and built once
at import.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple


class SystemCategory(str, Enum):
    CARDIOVASCULAR = "cardiovascular"
    RESPIRATORY    = "respiratory"
    NEUROLOGICAL   = "neurological"
    METABOLIC      = "metabolic"
    INFECTIOUS     = "infectious"
    OBSTETRIC      = "obstetric"
    TRAUMA         = "trauma"
    TOXICOLOGIC    = "toxicologic"
    HEMATOLOGIC    = "hematologic"


_CV  = SystemCategory.CARDIOVASCULAR
_RES = SystemCategory.RESPIRATORY
_NEU = SystemCategory.NEUROLOGICAL
_MET = SystemCategory.METABOLIC
_INF = SystemCategory.INFECTIOUS
_OBS = SystemCategory.OBSTETRIC
_TRA = SystemCategory.TRAUMA
_TOX = SystemCategory.TOXICOLOGIC
_HEM = SystemCategory.HEMATOLOGIC


# ── Condition → organ systems (primary first) ─────────────────────────────────
CONDITION_SYSTEMS: Mapping[str, Tuple[SystemCategory, ...]] = MappingProxyType({
    # Cardiovascular
    "myocardial_infarction":           (_CV,),
    "heart_failure":                   (_CV,),
    "svt":                             (_CV,),
    "ventricular_tachycardia":         (_CV,),
    "myocarditis":                     (_CV, _INF),
    "cardiac_tamponade":               (_CV,),
    "pulmonary_embolism":              (_CV, _RES, _HEM),
    "shock_hypovolemic":               (_CV,),
    "shock_cardiogenic":               (_CV,),
    "shock_obstructive":               (_CV,),
    "shock_distributive_septic":       (_INF, _CV),
    "shock_distributive_anaphylactic": (_RES, _CV),
    "shock_neurogenic":                (_CV, _NEU, _TRA),
    # Respiratory
    "foreign_body_aspiration":         (_RES,),
    "tension_pneumothorax":            (_RES,),
    "status_asthmaticus":              (_RES,),
    "anaphylaxis":                     (_RES, _CV),
    "pneumonia":                       (_RES, _INF),
    "bronchiolitis":                   (_RES, _INF),
    "croup":                           (_RES,),
    "epiglottitis":                    (_RES, _INF),
    "ards":                            (_RES,),
    # Neurological
    "stroke":                          (_NEU, _CV),
    "eclampsia":                       (_NEU, _OBS, _CV),
    "status_epilepticus":              (_NEU,),
    "bacterial_meningitis":            (_NEU, _INF),
    "encephalitis":                    (_NEU, _INF),
    "increased_icp":                   (_NEU,),
    # Metabolic
    "dka":                             (_MET, _CV),
    "hypoglycemia":                    (_MET, _NEU),
    "hyperkalemia":                    (_MET, _CV),
    # Infectious
    "septic_shock":                    (_INF, _CV),
    "neonatal_sepsis":                 (_INF, _CV),
    # Obstetric
    "postpartum_hemorrhage":           (_OBS, _CV, _HEM),
    "maternal_cardiac_arrest":         (_OBS, _CV),
    # Trauma / toxicology
    "severe_burns":                    (_TRA, _CV),
    "opioid_overdose":                 (_TOX, _RES, _NEU),
})


# ── Dangerous overlaps ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DangerousOverlap:
    """A combination of conditions that needs one merged protocol."""
    conditions: FrozenSet[str]
    name: str
    priority: str                            # "critical" | "high" | "moderate"
    interactions: Tuple[str, ...]
    integrated_protocol: str                 # key into protocols.PROTOCOLS

    def to_dict(self) -> dict:
        return {
            "conditions": sorted(self.conditions),
            "name": self.name,
            "priority": self.priority,
            "interactions": list(self.interactions),
            "integrated_protocol": self.integrated_protocol,
        }


DANGEROUS_OVERLAPS: Tuple[DangerousOverlap, ...] = (
    DangerousOverlap(
        conditions=frozenset({"eclampsia", "stroke"}),
        name="Eclampsia + Stroke",
        priority="critical",
        interactions=(
            "Both cause elevated BP - aggressive BP control needed",
            "Magnesium may mask stroke symptoms",
            "Urgent neurology consult required",
        ),
        integrated_protocol="eclampsia_stroke_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"septic_shock", "dka"}),
        name="Sepsis + DKA",
        priority="critical",
        interactions=(
            "Both cause shock - aggressive fluid resuscitation needed",
            "Infection triggers DKA - treat both simultaneously",
            "Antibiotics within 1 hour + insulin after initial fluids",
        ),
        integrated_protocol="sepsis_dka_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"anaphylaxis", "status_asthmaticus"}),
        name="Anaphylaxis + Asthma",
        priority="critical",
        interactions=(
            "Both cause bronchospasm - epinephrine + bronchodilators",
            "Anaphylaxis can trigger asthma exacerbation",
            "Steroids benefit both conditions",
        ),
        integrated_protocol="anaphylaxis_asthma_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"maternal_cardiac_arrest", "postpartum_hemorrhage"}),
        name="Maternal Cardiac Arrest + PPH",
        priority="critical",
        interactions=(
            "Hemorrhage likely cause of arrest",
            "CPR + left uterine displacement + massive transfusion",
            "Perimortem cesarean if >20 weeks + no ROSC in 4 minutes",
        ),
        integrated_protocol="maternal_arrest_pph_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"heart_failure", "pneumonia"}),
        name="Heart Failure + Pneumonia",
        priority="high",
        interactions=(
            "Fluids for sepsis may worsen heart failure",
            "Monitor for crackles, JVD, hepatomegaly after each bolus",
            "Early vasopressor support if fluid intolerant",
        ),
        integrated_protocol="heart_failure_pneumonia_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"bacterial_meningitis", "septic_shock"}),
        name="Meningitis + Septic Shock",
        priority="critical",
        interactions=(
            "Meningococcemia causes both",
            "Antibiotics + steroids + fluids + vasopressors",
            "Dexamethasone before or with first antibiotic dose",
        ),
        integrated_protocol="meningitis_septic_shock_protocol",
    ),
    DangerousOverlap(
        conditions=frozenset({"dka", "septic_shock", "shock_hypovolemic"}),
        name="DKA + Sepsis + Shock (Triple Threat)",
        priority="critical",
        interactions=(
            "Infection + dehydration + acidosis",
            "Aggressive fluids + antibiotics + insulin",
            "High mortality - ICU admission",
        ),
        integrated_protocol="triple_threat_protocol",
    ),
)


# ── Urgency ranks (lower runs first) ──────────────────────────────────────────
DEFAULT_RANK = 100

INTERVENTION_RANKS: Mapping[str, int] = MappingProxyType({
    # Airway / breathing threats (1-9)
    "foreign_body_aspiration":            1,
    "foreign_body_removal":               1,
    "tension_pneumothorax":               2,
    "needle_decompression":               2,
    "cardiac_tamponade":                  3,
    "pericardiocentesis":                 3,
    "maternal_cardiac_arrest":            4,
    "maternal_arrest_pph_integrated":     4,
    "cardiac_arrest":                     5,
    "anaphylaxis":                        6,
    "anaphylaxis_epinephrine":            6,
    "anaphylaxis_asthma_integrated":      6,
    "anaphylaxis_oxygen":                 7,
    "opioid_airway":                      8,
    "burn_airway":                        8,
    "naloxone":                           9,
    # Shock (10-19)
    "shock_hypovolemic":                 10,
    "hypovolemic_fluid_bolus":           10,
    "triple_threat_integrated":          10,
    "septic_shock":                      11,
    "shock_distributive_septic":         11,
    "sepsis_fluid_bolus":                11,
    "sepsis_dka_integrated":             11,
    "meningitis_septic_shock_integrated": 11,
    "shock_cardiogenic":                 12,
    "cardiogenic_diuretic":              12,
    "heart_failure_pneumonia_integrated": 12,
    "shock_obstructive":                 13,
    "obstructive_identify":              13,
    "shock_distributive_anaphylactic":   14,
    "shock_neurogenic":                  15,
    "neurogenic_spinal_immobilization":  15,
    "burn_fluid_resuscitation":          16,
    # Respiratory failure (20-29)
    "status_asthmaticus":                20,
    "asthma_albuterol":                  20,
    "asthma_ipratropium":                21,
    "epiglottitis":                      21,
    "croup":                             22,
    # Neurological (30-39)
    "status_epilepticus":                30,
    "status_epilepticus_lorazepam":      30,
    "stroke":                            31,
    "stroke_airway":                     31,
    "eclampsia":                         32,
    "eclampsia_magnesium_loading":       32,
    "eclampsia_stroke_integrated":       32,
    "eclampsia_antihypertensive":        33,
    # Metabolic (40-49)
    "dka":                               40,
    "dka_fluid_bolus":                   40,
    "hyperkalemia":                      41,
    "hyperkalemia_calcium":              41,
    "hypoglycemia":                      42,
    "hypoglycemia_dextrose":             42,
    # Infectious (50-59)
    "bacterial_meningitis":              50,
    "meningitis_antibiotics":            50,
    "sepsis":                            51,
    "sepsis_antibiotics":                51,
})


def rank_of(item_id: str) -> int:
    return INTERVENTION_RANKS.get(item_id, DEFAULT_RANK)
