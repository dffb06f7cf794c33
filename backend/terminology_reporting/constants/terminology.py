from enum import Enum
from typing import Dict


class TerminologyType(str, Enum):
    SNOMED = "SNOMED"
    DMD = "DMD"


# Step "details" keys (normalised: lowercase, no spaces/underscores/hyphens)
# mapped to the summary field they feed.
SNOMED_DETAIL_FIELDS: Dict[str, str] = {
    "version": "snomed_version",
    "release": "snomed_version",
    "concepts": "concept_count",
    "conceptcount": "concept_count",
    "descriptions": "description_count",
    "descriptioncount": "description_count",
    "newrelease": "snomed_new_release",
}

DMD_DETAIL_FIELDS: Dict[str, str] = {
    "version": "dmd_version",
    "release": "dmd_version",
    "vmps": "vmp_count",
    "vmpcount": "vmp_count",
    "amps": "amp_count",
    "ampcount": "amp_count",
    "xmlvalidation": "xml_validation_rate",
    "xmlvalidationrate": "xml_validation_rate",
    "snomedvalidation": "snomed_validation_rate",
    "snomedvalidationrate": "snomed_validation_rate",
    "newrelease": "dmd_new_release",
}

DETAIL_FIELDS_BY_TYPE: Dict[TerminologyType, Dict[str, str]] = {
    TerminologyType.SNOMED: SNOMED_DETAIL_FIELDS,
    TerminologyType.DMD: DMD_DETAIL_FIELDS,
}

# Summary fields per value kind, used when coercing parsed detail text
INTEGER_FIELDS = frozenset({"concept_count", "description_count", "vmp_count", "amp_count"})
DECIMAL_FIELDS = frozenset({"xml_validation_rate", "snomed_validation_rate"})
BOOLEAN_FIELDS = frozenset({"snomed_new_release", "dmd_new_release"})

SUCCESS_FIELD_BY_TYPE: Dict[TerminologyType, str] = {
    TerminologyType.SNOMED: "snomed_success",
    TerminologyType.DMD: "dmd_success",
}

# Labels the pipeline has written for each type, upper-cased with non-letters removed
TERMINOLOGY_ALIASES: Dict[str, TerminologyType] = {
    "SNOMED": TerminologyType.SNOMED,
    "SNOMEDCT": TerminologyType.SNOMED,
    "DMD": TerminologyType.DMD,
}
