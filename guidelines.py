# guidelines.py
# Published BP classification schemes. Categories are listed least -> most severe.
# Bounds are inclusive; a missing bound means unbounded on that side.

DEFAULT_GUIDELINE = "htnCanada2025"

GUIDELINES = {
    "htnCanada2025": {
        "key": "htnCanada2025",
        "name": "HTN Canada 2025",
        "description": "Hypertension Canada 2025 Primary Care Guideline",
        "categories": ["normal", "hypertensionCanada", "hypertensionTreat"],
        "thresholds": {
            "normal": {"systolic": {"max": 129}, "diastolic": {"max": 79}},
            "hypertensionCanada": {"systolic": {"min": 130, "max": 139}, "diastolic": {"min": 80, "max": 89}},
            "hypertensionTreat": {"systolic": {"min": 140}, "diastolic": {"min": 90}},
        },
        "reference_lines": {
            "systolic": [
                {"value": 130, "label": "130", "color": "#f59e0b"},
                {"value": 140, "label": "140", "color": "#ef4444"},
            ],
            "diastolic": [
                {"value": 80, "label": "80", "color": "#f59e0b"},
                {"value": 90, "label": "90", "color": "#ef4444"},
            ],
        },
    },
    "simple": {
        "key": "simple",
        "name": "Simple",
        "description": "Binary classification: Normal (<120/80) or Hypertension (≥120 or ≥80)",
        "categories": ["normal", "hypertension"],
        "thresholds": {
            "normal": {"systolic": {"max": 119}, "diastolic": {"max": 79}},
            "hypertension": {"systolic": {"min": 120}, "diastolic": {"min": 80}},
        },
        "reference_lines": {
            "systolic": [{"value": 120, "label": "120", "color": "#ef4444"}],
            "diastolic": [{"value": 80, "label": "80", "color": "#ef4444"}],
        },
    },
    "aha2017": {
        "key": "aha2017",
        "name": "AHA/ACC 2017",
        "description": "American Heart Association / American College of Cardiology 2017",
        "categories": ["normal", "elevated", "hypertension1", "hypertension2", "crisis"],
        "thresholds": {
            "normal": {"systolic": {"max": 119}, "diastolic": {"max": 79}},
            # systolic-only band: diastolic must stay normal
            "elevated": {"systolic": {"min": 120, "max": 129}, "diastolic": {"max": 79}},
            "hypertension1": {"systolic": {"min": 130, "max": 139}, "diastolic": {"min": 80, "max": 89}},
            "hypertension2": {"systolic": {"min": 140, "max": 179}, "diastolic": {"min": 90, "max": 119}},
            "crisis": {"systolic": {"min": 180}, "diastolic": {"min": 120}},
        },
        "reference_lines": {
            "systolic": [
                {"value": 120, "label": "120", "color": "#f59e0b"},
                {"value": 130, "label": "130", "color": "#f97316"},
                {"value": 140, "label": "140", "color": "#ef4444"},
            ],
            "diastolic": [
                {"value": 80, "label": "80", "color": "#f59e0b"},
                {"value": 90, "label": "90", "color": "#ef4444"},
            ],
        },
    },
    "esc2018": {
        "key": "esc2018",
        "name": "ESC/ESH 2018",
        "description": "European Society of Cardiology / European Society of Hypertension 2018",
        "categories": ["optimal", "normal", "highNormal", "hypertension1", "hypertension2", "hypertension3"],
        "thresholds": {
            "optimal": {"systolic": {"max": 119}, "diastolic": {"max": 79}},
            "normal": {"systolic": {"min": 120, "max": 129}, "diastolic": {"min": 80, "max": 84}},
            "highNormal": {"systolic": {"min": 130, "max": 139}, "diastolic": {"min": 85, "max": 89}},
            "hypertension1": {"systolic": {"min": 140, "max": 159}, "diastolic": {"min": 90, "max": 99}},
            "hypertension2": {"systolic": {"min": 160, "max": 179}, "diastolic": {"min": 100, "max": 109}},
            "hypertension3": {"systolic": {"min": 180}, "diastolic": {"min": 110}},
        },
        "reference_lines": {
            "systolic": [
                {"value": 130, "label": "130", "color": "#f59e0b"},
                {"value": 140, "label": "140", "color": "#f97316"},
                {"value": 160, "label": "160", "color": "#ef4444"},
            ],
            "diastolic": [
                {"value": 85, "label": "85", "color": "#f59e0b"},
                {"value": 90, "label": "90", "color": "#f97316"},
                {"value": 100, "label": "100", "color": "#ef4444"},
            ],
        },
    },
    "jnc7": {
        "key": "jnc7",
        "name": "JNC 7",
        "description": "Seventh Report of the Joint National Committee (2003)",
        "categories": ["normal", "prehypertension", "hypertension1", "hypertension2"],
        "thresholds": {
            "normal": {"systolic": {"max": 119}, "diastolic": {"max": 79}},
            "prehypertension": {"systolic": {"min": 120, "max": 139}, "diastolic": {"min": 80, "max": 89}},
            "hypertension1": {"systolic": {"min": 140, "max": 159}, "diastolic": {"min": 90, "max": 99}},
            "hypertension2": {"systolic": {"min": 160}, "diastolic": {"min": 100}},
        },
        "reference_lines": {
            "systolic": [
                {"value": 120, "label": "120", "color": "#f59e0b"},
                {"value": 140, "label": "140", "color": "#f97316"},
                {"value": 160, "label": "160", "color": "#ef4444"},
            ],
            "diastolic": [
                {"value": 80, "label": "80", "color": "#f59e0b"},
                {"value": 90, "label": "90", "color": "#f97316"},
                {"value": 100, "label": "100", "color": "#ef4444"},
            ],
        },
    },
}

# Display info is shared: the same key renders the same way under every guideline.
# severity: 0 green, 1 amber, 2 orange, 3 red, 4 red (darker chart colour)
CATEGORY_INFO = {
    "normal": {"label": "Normal", "color": "green", "chart_color": "#22c55e", "severity": 0,
               "description": "Within normal limits"},
    "optimal": {"label": "Optimal", "color": "green", "chart_color": "#22c55e", "severity": 0,
                "description": "Below 120/80"},
    "elevated": {"label": "Elevated", "color": "amber", "chart_color": "#f59e0b", "severity": 1,
                 "description": "Systolic 120-129 and diastolic below 80"},
    "highNormal": {"label": "High Normal", "short_label": "High Normal", "color": "amber",
                   "chart_color": "#f59e0b", "severity": 1,
                   "description": "Systolic 130-139 or diastolic 85-89"},
    "prehypertension": {"label": "Prehypertension", "short_label": "Pre-HTN", "color": "amber",
                        "chart_color": "#f59e0b", "severity": 1,
                        "description": "Systolic 120-139 or diastolic 80-89"},
    "hypertensionCanada": {"label": "Hypertension", "short_label": "HTN", "color": "amber",
                           "chart_color": "#f59e0b", "severity": 1,
                           "description": "Systolic 130-139 or diastolic 80-89"},
    "hypertension1": {"label": "Hypertension Stage 1", "short_label": "Stage 1", "color": "orange",
                      "chart_color": "#f97316", "severity": 2,
                      "description": "First hypertension tier"},
    "hypertension": {"label": "Hypertension", "short_label": "HTN", "color": "red",
                     "chart_color": "#ef4444", "severity": 3,
                     "description": "Systolic 120 or above, or diastolic 80 or above"},
    "hypertensionTreat": {"label": "HTN (Treat)", "short_label": "HTN (Treat)", "color": "red",
                          "chart_color": "#ef4444", "severity": 3,
                          "description": "Systolic 140 or above, or diastolic 90 or above"},
    "hypertension2": {"label": "Hypertension Stage 2", "short_label": "Stage 2", "color": "red",
                      "chart_color": "#ef4444", "severity": 3,
                      "description": "Second hypertension tier"},
    "hypertension3": {"label": "Hypertension Grade 3", "short_label": "Grade 3", "color": "red",
                      "chart_color": "#dc2626", "severity": 4,
                      "description": "Systolic 180 or above, or diastolic 110 or above"},
    "crisis": {"label": "Hypertensive Crisis", "short_label": "Crisis", "color": "red",
               "chart_color": "#dc2626", "severity": 4,
               "description": "Systolic 180 or above, or diastolic 120 or above. Seek immediate care"},
}
