US_ATLAS_STATES_URL = "https://cdn.jsdelivr.net/npm/us-atlas@3/states-10m.json"

POLLUTANTS = ["NO2", "O3", "PM", "CH2O"]

PURPLE_LIGHT = "#E9D5FF"
PURPLE_PRIMARY = "#BB4DFF"
PURPLE_DARK = "#7C3AED"
NO_DATA_FILL = "#F3F4F6"
SLATE_600 = "#475569"
SLATE_700 = "#334155"

PURPLE_RAMP = (PURPLE_LIGHT, PURPLE_PRIMARY, PURPLE_DARK)

DEFAULT_DOMAIN = (0.0, 200.0)

TAG_CATEGORY_LABELS = {
    "Activity": "Outdoor Activities",
    "Vulnerability": "Vulnerability and Health",
    "Lifestyle": "Occupation and Lifestyle",
}

AQI_LEVELS = [
    {"upper": 50, "key": "good", "label": "Good", "description": "Air quality is satisfactory"},
    {"upper": 100, "key": "moderate", "label": "Moderate", "description": "Air quality is acceptable"},
    {"upper": 150, "key": "unhealthyForSensitive", "label": "Unhealthy for Sensitive",
     "description": "Sensitive individuals may experience symptoms"},
    {"upper": 200, "key": "unhealthy", "label": "Unhealthy", "description": "Everyone may experience health effects"},
    {"upper": 300, "key": "veryUnhealthy", "label": "Very Unhealthy", "description": "Health warnings for everyone"},
    {"upper": None, "key": "hazardous", "label": "Hazardous", "description": "Emergency conditions"},
]

RISK_LEVEL_LABELS = ["Good", "Moderate", "USG", "Unhealthy", "Very Unhealthy", "Hazardous", "Unknown"]
DOMINANT_POLLUTANTS = POLLUTANTS + ["Unknown"]

STATE_FIPS_TO_NAME = {
    "01": "Alabama", "02": "Alaska", "04": "Arizona", "05": "Arkansas",
    "06": "California", "08": "Colorado", "09": "Connecticut", "10": "Delaware",
    "11": "District of Columbia", "12": "Florida", "13": "Georgia", "15": "Hawaii",
    "16": "Idaho", "17": "Illinois", "18": "Indiana", "19": "Iowa",
    "20": "Kansas", "21": "Kentucky", "22": "Louisiana", "23": "Maine",
    "24": "Maryland", "25": "Massachusetts", "26": "Michigan", "27": "Minnesota",
    "28": "Mississippi", "29": "Missouri", "30": "Montana", "31": "Nebraska",
    "32": "Nevada", "33": "New Hampshire", "34": "New Jersey", "35": "New Mexico",
    "36": "New York", "37": "North Carolina", "38": "North Dakota", "39": "Ohio",
    "40": "Oklahoma", "41": "Oregon", "42": "Pennsylvania", "44": "Rhode Island",
    "45": "South Carolina", "46": "South Dakota", "47": "Tennessee", "48": "Texas",
    "49": "Utah", "50": "Vermont", "51": "Virginia", "53": "Washington",
    "54": "West Virginia", "55": "Wisconsin", "56": "Wyoming", "72": "Puerto Rico",
}

SNAPSHOT_JSON_PATTERN = r"^\d{8}_\d{4}\.json$"
SNAPSHOT_CSV_PATTERN = r"^\d{8}_\d{4}\.csv$"
