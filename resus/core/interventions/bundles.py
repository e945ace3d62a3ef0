"""
Treatment Bundles

One builder per diagnosis id.  A builder receives the survey (for weight,
blood pressure, glucose and pregnancy status) and returns the four tiers of
its bundle.  Weight-scaled doses are rendered into the intervention name.

Registering a bundle:
    @bundle("my_diagnosis")
    def _my_diagnosis(survey):
        return Bundle(immediate=[...], required_tests=[...])
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping, NamedTuple, Optional, Sequence, TYPE_CHECKING

from resus.utils import UnknownDiagnosisError
from .base import (
    Benefit,
    Dosing,
    Intervention,
    RequiredTest,
    Risk,
    TestPriority,
    Tier,
    TimeWindow,
)

if TYPE_CHECKING:
    from resus.models.survey import PrimarySurveyData

IMMEDIATE, URGENT, CONFIRMATORY = Tier.IMMEDIATE, Tier.URGENT, Tier.CONFIRMATORY
STAT, URGENT_TEST = TestPriority.STAT, TestPriority.URGENT

# ── Thresholds ────────────────────────────────────────────────────────────────
DEXTROSE_GLUCOSE_MAX      = 3.0     # mmol/L; dextrose bolus below this
SEVERE_HYPERTENSION_SBP   = 160     # mmHg; antihypertensive at or above this
MAGNESIUM_LOADING_MAX_MG  = 4000


class Bundle(NamedTuple):
    immediate: Sequence[Intervention] = ()
    urgent: Sequence[Intervention] = ()
    confirmatory: Sequence[Intervention] = ()
    required_tests: Sequence[RequiredTest] = ()


BundleBuilder = Callable[["PrimarySurveyData"], Bundle]

_BUILDERS: Dict[str, BundleBuilder] = {}
BUNDLES: Mapping[str, BundleBuilder] = MappingProxyType(_BUILDERS)


def bundle(*diagnosis_ids: str):
    """Register the decorated builder for one or more diagnosis ids."""
    def register(builder: BundleBuilder) -> BundleBuilder:
        for diagnosis_id in diagnosis_ids:
            _BUILDERS[diagnosis_id] = builder
        return builder
    return register


def get_bundle_builder(diagnosis_id: str, strict: bool = False) -> Optional[BundleBuilder]:
    """
    Return the builder for ``diagnosis_id``.

    Missing ids return None, or raise UnknownDiagnosisError when ``strict``.
    """
    builder = _BUILDERS.get(diagnosis_id)
    if builder is None and strict:
        raise UnknownDiagnosisError(diagnosis_id, registry="bundles")
    return builder


def _test(name: str, priority: TestPriority = STAT, threshold: Optional[str] = None) -> RequiredTest:
    return RequiredTest(name=name, priority=priority, threshold=threshold)


def _weight(survey: "PrimarySurveyData") -> float:
    return survey.exposure.weight


# ── Metabolic ─────────────────────────────────────────────────────────────────

@bundle("dka")
def _dka(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="dka_fluid_bolus",
                name=f"Normal Saline Bolus: {w * 10:.0f} mL (10 mL/kg)",
                category=IMMEDIATE,
                indication="DKA - Fluid resuscitation",
                contraindications=("Signs of heart failure", "Pulmonary edema"),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
                dosing=Dosing("10 mL/kg", "IV over 10-15 minutes", max_dose=1000),
                monitoring=("Heart rate", "Blood pressure", "Urine output", "Blood glucose hourly"),
            ),
            Intervention(
                id="dka_monitoring",
                name="Continuous Cardiac Monitoring",
                category=IMMEDIATE,
                indication="DKA - Monitor for arrhythmias (hypokalemia risk)",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        confirmatory=[
            Intervention(
                id="dka_insulin",
                name=f"Regular Insulin: {w * 0.1:.2f} units/hr (0.1 units/kg/hr)",
                category=CONFIRMATORY,
                indication="DKA - After confirmed ketoacidosis",
                contraindications=("Hyperosmolar hyperglycemic state (HHS) without ketones",),
                required_tests=(
                    _test("pH", threshold="<7.3"),
                    _test("Ketones (blood or urine)", threshold="positive"),
                ),
                risk_if_wrong=Risk.HIGH,
                benefit_if_right=Benefit.HIGH,
                time_window=TimeWindow.HOURS,
                dosing=Dosing("0.1 units/kg/hr", "IV infusion"),
                monitoring=("Blood glucose hourly", "Electrolytes every 2-4 hours", "Neurological status"),
            ),
        ],
        required_tests=[
            _test("Venous blood gas (pH, HCO3, pCO2)"),
            _test("Blood or urine ketones"),
            _test("Basic metabolic panel (Na, K, Cl, BUN, Cr, glucose)"),
            _test("HbA1c (if new diagnosis)", URGENT_TEST),
        ],
    )


@bundle("hyperkalemia")
def _hyperkalemia(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="hyperkalemia_calcium",
                name="Calcium Gluconate 10%: 10 mL (1 g) IV slow push",
                category=IMMEDIATE,
                indication="Hyperkalemia - Cardiac membrane stabilization",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("1 g (10 mL of 10% solution)", "IV over 2-5 minutes"),
                monitoring=("ECG - repeat if no improvement in 5 minutes",),
            ),
            Intervention(
                id="hyperkalemia_insulin_dextrose",
                name="Insulin 10 units + D50 50 mL IV push",
                category=IMMEDIATE,
                indication="Hyperkalemia - Shift potassium intracellularly",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
                monitoring=("Blood glucose every 15-30 minutes",),
            ),
            Intervention(
                id="hyperkalemia_bicarbonate",
                name="Sodium Bicarbonate 8.4%: 50 mEq (50 mL) IV push",
                category=IMMEDIATE,
                indication="Hyperkalemia with acidosis",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
            ),
        ],
        required_tests=[
            _test("Stat potassium (venous blood gas fastest)"),
            _test("Basic metabolic panel"),
            _test("ECG"),
        ],
    )


@bundle("hypoglycemia")
def _hypoglycemia(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    immediate = []
    glucose = survey.disability.blood_glucose
    if glucose is not None and glucose < DEXTROSE_GLUCOSE_MAX:
        immediate.append(Intervention(
            id="hypoglycemia_dextrose",
            name=f"Dextrose 10%: {w * 5:.0f} mL (5 mL/kg) IV push",
            category=IMMEDIATE,
            indication="Hypoglycemia - Immediate glucose replacement",
            risk_if_wrong=Risk.NONE,
            benefit_if_right=Benefit.LIFE_SAVING,
            dosing=Dosing(
                "5 mL/kg of D10 (or 2 mL/kg of D25, or 1 mL/kg of D50 in adults)",
                "IV push",
            ),
            monitoring=("Blood glucose every 15 minutes until stable", "Neurological status"),
        ))
    return Bundle(
        immediate=immediate,
        required_tests=[
            _test("Blood glucose (confirm)"),
            _test("Insulin level (if recurrent)", URGENT_TEST),
            _test("C-peptide (if recurrent)", URGENT_TEST),
        ],
    )


# ── Infectious ────────────────────────────────────────────────────────────────

@bundle("septic_shock", "shock_distributive_septic")
def _septic_shock(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="sepsis_fluid_bolus",
                name=f"Normal Saline Bolus: {w * 20:.0f} mL (20 mL/kg)",
                category=IMMEDIATE,
                indication="Septic shock - Fluid resuscitation",
                contraindications=("Signs of fluid overload", "Cardiogenic shock"),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("20 mL/kg", "IV over 5-10 minutes, may repeat up to 60 mL/kg",
                              max_dose=1000),
                monitoring=("Heart rate", "Blood pressure", "Perfusion", "Urine output"),
            ),
        ],
        urgent=[
            Intervention(
                id="sepsis_antibiotics",
                name="Broad-spectrum Antibiotics (within 1 hour)",
                category=URGENT,
                indication="Septic shock - Time-critical",
                contraindications=("Known severe antibiotic allergy",),
                required_tests=(_test("Blood cultures", threshold="before antibiotics if possible"),),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                monitoring=("Clinical response", "Fever curve", "WBC trend"),
            ),
        ],
        required_tests=[
            _test("Blood cultures (2 sets)"),
            _test("Complete blood count"),
            _test("Lactate"),
            _test("Procalcitonin", URGENT_TEST),
        ],
    )


@bundle("neonatal_sepsis")
def _neonatal_sepsis(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        urgent=[
            Intervention(
                id="neonatal_sepsis_antibiotics",
                name="Ampicillin + Gentamicin IV (within 1 hour)",
                category=URGENT,
                indication="Neonatal sepsis - Empiric coverage",
                required_tests=(_test("Blood cultures", threshold="before antibiotics"),),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
            ),
        ],
        required_tests=[
            _test("Blood cultures"),
            _test("Complete blood count"),
            _test("C-reactive protein"),
            _test("Lumbar puncture (if stable)", URGENT_TEST),
        ],
    )


@bundle("bacterial_meningitis")
def _bacterial_meningitis(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="meningitis_antibiotics",
                name=(
                    f"Ceftriaxone: {w * 50:.0f} mg (50 mg/kg) IV + "
                    f"Vancomycin: {w * 15:.0f} mg (15 mg/kg) IV"
                ),
                category=IMMEDIATE,
                indication="Bacterial meningitis - Empiric coverage",
                contraindications=("Known severe antibiotic allergy",),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("Ceftriaxone 50 mg/kg + Vancomycin 15 mg/kg", "IV", max_dose=2000),
            ),
            Intervention(
                id="meningitis_dexamethasone",
                name=f"Dexamethasone: {w * 0.15:.2f} mg (0.15 mg/kg) IV",
                category=IMMEDIATE,
                indication="Bacterial meningitis - Before or with first antibiotic dose",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
                dosing=Dosing("0.15 mg/kg", "IV", max_dose=10),
            ),
        ],
        urgent=[
            Intervention(
                id="meningitis_lp",
                name="Lumbar Puncture (CSF Analysis)",
                category=URGENT,
                indication="Confirm bacterial meningitis",
                contraindications=("Signs of raised intracranial pressure", "Coagulopathy"),
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
                time_window=TimeWindow.HOURS,
            ),
        ],
        required_tests=[
            _test("Blood cultures (before antibiotics)"),
            _test("CSF analysis (cell count, glucose, protein, Gram stain, culture)"),
            _test("CT head (if signs of raised ICP before LP)"),
        ],
    )


# ── Obstetric ─────────────────────────────────────────────────────────────────

@bundle("eclampsia")
def _eclampsia(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    immediate = [
        Intervention(
            id="eclampsia_magnesium_loading",
            name=(
                f"Magnesium Sulfate Loading: {min(w * 40, MAGNESIUM_LOADING_MAX_MG):.0f} mg "
                "(40 mg/kg, max 4g)"
            ),
            category=IMMEDIATE,
            indication="Eclampsia - Seizure prevention and treatment",
            contraindications=("Myasthenia gravis", "Heart block"),
            risk_if_wrong=Risk.LOW,
            benefit_if_right=Benefit.LIFE_SAVING,
            dosing=Dosing("40 mg/kg (max 4 g)", "IV over 15-20 minutes", max_dose=MAGNESIUM_LOADING_MAX_MG),
            monitoring=("Respiratory rate", "Deep tendon reflexes", "Urine output", "Magnesium levels"),
        ),
    ]
    bp = survey.circulation.blood_pressure
    if bp is not None and bp.systolic >= SEVERE_HYPERTENSION_SBP:
        immediate.append(Intervention(
            id="eclampsia_antihypertensive",
            name="Antihypertensive (Labetalol or Hydralazine)",
            category=IMMEDIATE,
            indication="Severe hypertension (SBP ≥160 or DBP ≥110)",
            contraindications=("Asthma (for labetalol)", "Heart failure"),
            risk_if_wrong=Risk.MODERATE,
            benefit_if_right=Benefit.HIGH,
            monitoring=("Blood pressure every 15 minutes", "Fetal heart rate"),
        ))
    return Bundle(
        immediate=immediate,
        required_tests=[
            _test("Complete blood count (platelets)"),
            _test("Liver enzymes (AST, ALT)"),
            _test("Renal function (Cr, BUN)"),
            _test("Urine protein", URGENT_TEST),
        ],
    )


@bundle("postpartum_hemorrhage")
def _postpartum_hemorrhage(survey: "PrimarySurveyData") -> Bundle:
    immediate = [
        Intervention(
            id="pph_oxytocin",
            name="Oxytocin 10 units IM or 20 units in 1L NS IV",
            category=IMMEDIATE,
            indication="Postpartum hemorrhage - Uterine atony",
            risk_if_wrong=Risk.LOW,
            benefit_if_right=Benefit.LIFE_SAVING,
            monitoring=("Uterine tone", "Blood loss", "Heart rate", "Blood pressure"),
        ),
    ]
    pregnancy = survey.exposure.pregnancy_related
    if pregnancy is not None and pregnancy.days_postpartum == 0:
        immediate.append(Intervention(
            id="pph_tranexamic_acid",
            name="Tranexamic Acid 1 g IV over 10 minutes",
            category=IMMEDIATE,
            indication="Postpartum hemorrhage - Within 3 hours of delivery",
            contraindications=("History of thrombosis", "Seizure disorder"),
            risk_if_wrong=Risk.LOW,
            benefit_if_right=Benefit.HIGH,
        ))
    return Bundle(
        immediate=immediate,
        required_tests=[
            _test("Complete blood count (Hgb, platelets)"),
            _test("Coagulation panel (PT, aPTT, fibrinogen)"),
            _test("Type and crossmatch (4-6 units)"),
        ],
    )


# ── Respiratory / airway ──────────────────────────────────────────────────────

@bundle("anaphylaxis", "shock_distributive_anaphylactic")
def _anaphylaxis(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="anaphylaxis_epinephrine",
                name=f"Epinephrine 1:1000: {w * 0.01:.2f} mL (0.01 mL/kg, max 0.5 mL) IM",
                category=IMMEDIATE,
                indication="Anaphylaxis - First-line treatment",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                time_window=TimeWindow.SECONDS,
                dosing=Dosing("0.01 mL/kg of 1:1000", "IM (anterolateral thigh)", max_dose=0.5),
                monitoring=("Heart rate", "Blood pressure", "Respiratory status",
                            "May repeat every 5-15 minutes"),
            ),
            Intervention(
                id="anaphylaxis_oxygen",
                name="High-flow Oxygen",
                category=IMMEDIATE,
                indication="Anaphylaxis - Hypoxia prevention",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        urgent=[
            Intervention(
                id="anaphylaxis_antihistamine",
                name="Diphenhydramine 1-2 mg/kg IV/IM",
                category=URGENT,
                indication="Anaphylaxis - Adjunct therapy",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
            ),
        ],
        required_tests=[_test("Tryptase level (within 1-2 hours)", URGENT_TEST)],
    )


@bundle("status_asthmaticus")
def _status_asthmaticus(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="asthma_albuterol",
                name="Albuterol 2.5-5 mg nebulized (continuous if severe)",
                category=IMMEDIATE,
                indication="Status asthmaticus - Bronchodilation",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
                monitoring=("Heart rate", "Respiratory rate", "SpO2", "Peak flow"),
            ),
            Intervention(
                id="asthma_ipratropium",
                name="Ipratropium 0.5 mg nebulized (with albuterol)",
                category=IMMEDIATE,
                indication="Status asthmaticus - Adjunct bronchodilation",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
            ),
        ],
        urgent=[
            Intervention(
                id="asthma_steroids",
                name="Methylprednisolone 1-2 mg/kg IV or Prednisone 1-2 mg/kg PO",
                category=URGENT,
                indication="Status asthmaticus - Reduce airway inflammation",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
                time_window=TimeWindow.HOURS,
            ),
        ],
        required_tests=[
            _test("Chest X-ray (if first episode or complications)", URGENT_TEST),
            _test("Arterial blood gas (if severe)", URGENT_TEST),
        ],
    )


@bundle("foreign_body_aspiration")
def _foreign_body_aspiration(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="foreign_body_removal",
                name="Foreign Body Removal (Back Blows/Heimlich/Direct Laryngoscopy)",
                category=IMMEDIATE,
                indication="Foreign body airway obstruction",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                time_window=TimeWindow.SECONDS,
                dosing=Dosing(
                    "Age-appropriate technique",
                    "Infant: 5 back blows + 5 chest thrusts. Child/Adult: Heimlich maneuver. "
                    "Complete obstruction: Direct laryngoscopy + Magill forceps",
                ),
                monitoring=("Airway patency", "SpO2", "Respiratory effort"),
            ),
        ],
    )


@bundle("tension_pneumothorax")
def _tension_pneumothorax(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="needle_decompression",
                name="Needle Decompression (2nd Intercostal Space, Midclavicular Line)",
                category=IMMEDIATE,
                indication="Tension pneumothorax - Life-threatening",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.LIFE_SAVING,
                time_window=TimeWindow.SECONDS,
                dosing=Dosing("14-16G needle (adult), 18-20G (child)", "Needle thoracostomy"),
            ),
        ],
        urgent=[
            Intervention(
                id="chest_tube",
                name="Chest Tube Insertion (5th Intercostal Space, Anterior Axillary Line)",
                category=URGENT,
                indication="Definitive management after needle decompression",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
                dosing=Dosing("28-32F (adult), 16-24F (child)", "Tube thoracostomy"),
            ),
        ],
        required_tests=[_test("Chest X-ray (after tube insertion)", URGENT_TEST)],
    )


# ── Cardiovascular ────────────────────────────────────────────────────────────

@bundle("pulmonary_embolism")
def _pulmonary_embolism(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="pe_heparin_bolus",
                name=f"Unfractionated Heparin Bolus: {w * 75:.0f} units (75 units/kg)",
                category=IMMEDIATE,
                indication="Suspected PE - Start before imaging",
                contraindications=("Active bleeding", "Recent surgery", "Recent head injury",
                                   "Known bleeding disorder"),
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("75 units/kg", "IV bolus"),
            ),
            Intervention(
                id="pe_heparin_infusion",
                name=f"Unfractionated Heparin Infusion: {w * 20:.0f} units/hr (20 units/kg/hr)",
                category=IMMEDIATE,
                indication="Suspected PE - Maintenance anticoagulation",
                contraindications=("Active bleeding",),
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
                dosing=Dosing("20 units/kg/hr", "IV infusion"),
                monitoring=("aPTT every 4-6 hours", "Signs of bleeding"),
            ),
        ],
        required_tests=[
            _test("CTPA (CT Pulmonary Angiography)"),
            _test("Lower limb Doppler ultrasound"),
            _test("D-dimer", URGENT_TEST),
            _test("ECG"),
            _test("Troponin", URGENT_TEST),
        ],
    )


@bundle("cardiac_tamponade")
def _cardiac_tamponade(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="pericardiocentesis",
                name="Pericardiocentesis (Subxiphoid Approach)",
                category=IMMEDIATE,
                indication="Cardiac tamponade with hemodynamic compromise",
                contraindications=("Aortic dissection (relative)",),
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.LIFE_SAVING,
            ),
        ],
        urgent=[
            Intervention(
                id="tamponade_fluid",
                name=f"Normal Saline Bolus: {w * 10:.0f} mL (10 mL/kg)",
                category=URGENT,
                indication="Support preload while preparing pericardiocentesis",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
                dosing=Dosing("10 mL/kg", "IV bolus"),
            ),
        ],
        required_tests=[
            _test("Cardiac ultrasound (FAST exam)"),
            _test("ECG"),
        ],
    )


@bundle("myocardial_infarction")
def _myocardial_infarction(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="mi_aspirin",
                name="Aspirin 325 mg PO (chewed)",
                category=IMMEDIATE,
                indication="Suspected acute coronary syndrome",
                contraindications=("Aspirin allergy", "Active bleeding"),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
            ),
            Intervention(
                id="mi_oxygen",
                name="Oxygen Therapy (Target SpO2 >94%)",
                category=IMMEDIATE,
                indication="Hypoxia in suspected MI",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.MODERATE,
            ),
        ],
        confirmatory=[
            Intervention(
                id="mi_thrombolysis",
                name="Thrombolysis (tPA/TNK) or Primary PCI",
                category=CONFIRMATORY,
                indication="STEMI confirmed on ECG",
                contraindications=("Recent surgery", "Active bleeding", "Prior hemorrhagic stroke"),
                required_tests=(
                    _test("ECG showing STEMI", threshold="ST elevation ≥1 mm in 2+ contiguous leads"),
                ),
                risk_if_wrong=Risk.CRITICAL,
                benefit_if_right=Benefit.LIFE_SAVING,
            ),
        ],
        required_tests=[
            _test("12-lead ECG"),
            _test("Troponin"),
            _test("Basic metabolic panel", URGENT_TEST),
        ],
    )


# ── Neurological ──────────────────────────────────────────────────────────────

@bundle("status_epilepticus")
def _status_epilepticus(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    immediate = [
        Intervention(
            id="status_epilepticus_lorazepam",
            name=f"Lorazepam: {w * 0.1:.2f} mg (0.1 mg/kg, max 4 mg) IV",
            category=IMMEDIATE,
            indication="Status epilepticus - First-line benzodiazepine",
            contraindications=("Respiratory depression",),
            risk_if_wrong=Risk.LOW,
            benefit_if_right=Benefit.LIFE_SAVING,
            dosing=Dosing("0.1 mg/kg", "IV over 2 minutes, may repeat once", max_dose=4),
            monitoring=("Respiratory status", "Seizure activity"),
        ),
    ]
    if survey.is_pregnant_or_postpartum:
        immediate.append(Intervention(
            id="status_epilepticus_pregnancy_note",
            name="Pregnancy-Safe Anticonvulsants",
            category=IMMEDIATE,
            indication="Avoid valproate (teratogenic)",
            contraindications=("Valproate",),
            risk_if_wrong=Risk.NONE,
            benefit_if_right=Benefit.HIGH,
            monitoring=("Consider magnesium sulfate if eclampsia not excluded", "Fetal monitoring"),
        ))
    return Bundle(
        immediate=immediate,
        required_tests=[
            _test("Blood glucose (rule out hypoglycemia)"),
            _test("Electrolytes (Na, Ca, Mg)"),
            _test("Anticonvulsant levels (if known epilepsy)", URGENT_TEST),
        ],
    )


@bundle("stroke")
def _stroke(survey: "PrimarySurveyData") -> Bundle:
    return Bundle(
        immediate=[
            Intervention(
                id="stroke_airway",
                name="Airway Protection (Positioning, Suctioning, Consider Intubation if GCS <8)",
                category=IMMEDIATE,
                indication="Stroke with reduced consciousness",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        confirmatory=[
            Intervention(
                id="stroke_tpa",
                name="Alteplase (tPA) 0.9 mg/kg IV (max 90 mg)",
                category=CONFIRMATORY,
                indication="Acute ischemic stroke within the treatment window",
                contraindications=("Intracranial hemorrhage", "Recent surgery", "Active bleeding"),
                required_tests=(
                    _test("CT head (non-contrast)", threshold="No hemorrhage"),
                    _test("Time of symptom onset", threshold="<4.5 hours"),
                ),
                risk_if_wrong=Risk.CRITICAL,
                benefit_if_right=Benefit.HIGH,
                dosing=Dosing("0.9 mg/kg (10% bolus, remainder over 60 minutes)", "IV", max_dose=90),
            ),
        ],
        required_tests=[
            _test("CT head (non-contrast) - URGENT"),
            _test("Blood glucose"),
            _test("Coagulation studies (PT, aPTT, INR)"),
        ],
    )


# ── Trauma / toxicology ───────────────────────────────────────────────────────

@bundle("opioid_overdose")
def _opioid_overdose(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="naloxone",
                name=f"Naloxone: {w * 0.1:.2f} mg (0.1 mg/kg) IV/IM/IN",
                category=IMMEDIATE,
                indication="Opioid overdose - Respiratory depression",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("0.1 mg/kg", "IV/IM/IN", max_dose=2, min_dose=0.4),
                monitoring=("Respiratory rate", "Level of consciousness", "Re-sedation (short half-life)"),
            ),
            Intervention(
                id="opioid_airway",
                name="Bag-Valve-Mask Ventilation (if apneic or RR <10)",
                category=IMMEDIATE,
                indication="Opioid-induced hypoventilation",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.LIFE_SAVING,
                time_window=TimeWindow.SECONDS,
            ),
        ],
        required_tests=[
            _test("Urine drug screen", URGENT_TEST),
            _test("Blood glucose"),
            _test("Arterial blood gas (if severe)", URGENT_TEST),
        ],
    )


@bundle("severe_burns")
def _severe_burns(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="burn_fluid_resuscitation",
                name=f"Fluid Resuscitation: {w * 4:.0f} mL/kg per % TBSA burned (Parkland formula)",
                category=IMMEDIATE,
                indication="Major burns - Prevent burn shock",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("4 mL/kg/%TBSA over 24 h, half in first 8 h", "IV (Ringer's lactate)"),
                monitoring=("Urine output (target 0.5-1 mL/kg/hr)", "Heart rate", "Blood pressure"),
            ),
            Intervention(
                id="burn_airway",
                name="Early Intubation (if inhalation injury suspected)",
                category=IMMEDIATE,
                indication="Facial burns, singed nasal hair, stridor or carbonaceous sputum",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.LIFE_SAVING,
            ),
        ],
        urgent=[
            Intervention(
                id="escharotomy",
                name="Escharotomy (circumferential full-thickness burns)",
                category=URGENT,
                indication="Compromised circulation or ventilation from eschar",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
                time_window=TimeWindow.HOURS,
            ),
        ],
        required_tests=[
            _test("Carboxyhemoglobin level (if smoke inhalation)"),
            _test("Arterial blood gas", URGENT_TEST),
            _test("Basic metabolic panel", URGENT_TEST),
        ],
    )


# ── Shock subtypes ────────────────────────────────────────────────────────────

@bundle("shock_hypovolemic")
def _shock_hypovolemic(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="hypovolemic_fluid_bolus",
                name=f"Normal Saline Bolus: {w * 20:.0f} mL (20 mL/kg)",
                category=IMMEDIATE,
                indication="Hypovolemic shock - Volume replacement",
                contraindications=("Signs of fluid overload",),
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.LIFE_SAVING,
                dosing=Dosing("20 mL/kg", "IV bolus, repeat up to 60 mL/kg"),
                monitoring=("Heart rate", "Blood pressure", "Capillary refill", "Lung sounds"),
            ),
        ],
        required_tests=[
            _test("Complete blood count"),
            _test("Type and crossmatch"),
            _test("Lactate"),
        ],
    )


@bundle("shock_cardiogenic")
def _shock_cardiogenic(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="cardiogenic_diuretic",
                name=f"Furosemide: {w * 1:.0f} mg (1 mg/kg) IV",
                category=IMMEDIATE,
                indication="Cardiogenic shock with pulmonary edema - avoid fluid boluses",
                contraindications=("Hypovolemia",),
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
                dosing=Dosing("1 mg/kg", "IV", max_dose=40),
                monitoring=("Urine output", "Blood pressure", "Lung sounds"),
            ),
        ],
        urgent=[
            Intervention(
                id="cardiogenic_inotrope",
                name="Dobutamine Infusion (5-20 mcg/kg/min)",
                category=URGENT,
                indication="Low cardiac output",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        required_tests=[
            _test("ECG"),
            _test("Echocardiogram"),
            _test("Troponin"),
            _test("BNP", URGENT_TEST),
        ],
    )


@bundle("shock_obstructive")
def _shock_obstructive(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="obstructive_identify",
                name="Identify and Remove Obstruction (Tension Pneumothorax, Tamponade, PE)",
                category=IMMEDIATE,
                indication="Obstructive shock",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.LIFE_SAVING,
            ),
        ],
        urgent=[
            Intervention(
                id="obstructive_fluid",
                name=f"Cautious Fluid Bolus: {w * 10:.0f} mL (10 mL/kg)",
                category=URGENT,
                indication="Support preload while preparing definitive treatment",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
                dosing=Dosing("10 mL/kg", "IV bolus"),
            ),
        ],
        required_tests=[
            _test("Bedside ultrasound (FAST, lung)"),
            _test("Chest X-ray"),
            _test("CTPA (if PE suspected)", URGENT_TEST),
        ],
    )


@bundle("shock_neurogenic")
def _shock_neurogenic(survey: "PrimarySurveyData") -> Bundle:
    w = _weight(survey)
    return Bundle(
        immediate=[
            Intervention(
                id="neurogenic_spinal_immobilization",
                name="Spinal Immobilization (C-collar, backboard)",
                category=IMMEDIATE,
                indication="Suspected spinal cord injury",
                risk_if_wrong=Risk.NONE,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        urgent=[
            Intervention(
                id="neurogenic_fluid",
                name=f"Cautious Fluid Bolus: {w * 10:.0f} mL (10 mL/kg)",
                category=URGENT,
                indication="Neurogenic shock - avoid overload",
                risk_if_wrong=Risk.LOW,
                benefit_if_right=Benefit.MODERATE,
                dosing=Dosing("10 mL/kg", "IV bolus"),
            ),
            Intervention(
                id="neurogenic_vasopressor",
                name="Norepinephrine Infusion (0.05-0.5 mcg/kg/min)",
                category=URGENT,
                indication="Fluid-refractory neurogenic shock",
                risk_if_wrong=Risk.MODERATE,
                benefit_if_right=Benefit.HIGH,
            ),
        ],
        required_tests=[_test("MRI spine", URGENT_TEST)],
    )
