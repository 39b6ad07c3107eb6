"""
RHEL license classification and the license URL catalogue.

Boot disks carry license resource URLs such as
``projects/rhel-cloud/global/licenses/rhel-9-server-payg``.  The
classifier buckets them by billing model; the catalogue maps a requested
billing model and RHEL major version to the URL written during a swap.
"""

from __future__ import annotations

from typing import Iterable

from rhelswap.models import DiskRecord, LicenseClassification

BYOS = "BYOS"
PAYG = "PAYG"
MARKETPLACE = "Marketplace"
RHEL = "RHEL"
CUSTOM = "Custom"

# Output order of ``LicenseClassification.types``.
CATEGORY_ORDER = (BYOS, PAYG, MARKETPLACE, RHEL, CUSTOM)

SUPPORTED_LICENSE_TYPES = ("PAYG", "BYOS")
SUPPORTED_RHEL_VERSIONS = ("rhel-7", "rhel-8", "rhel-9")

LICENSE_URLS: dict[str, dict[str, str]] = {
    "PAYG": {
        "rhel-7": "projects/rhel-cloud/global/licenses/rhel-7-server-payg",
        "rhel-8": "projects/rhel-cloud/global/licenses/rhel-8-server-payg",
        "rhel-9": "projects/rhel-cloud/global/licenses/rhel-9-server-payg",
    },
    "BYOS": {
        "rhel-7": "projects/rhel-cloud/global/licenses/rhel-7-server-byos",
        "rhel-8": "projects/rhel-cloud/global/licenses/rhel-8-server-byos",
        "rhel-9": "projects/rhel-cloud/global/licenses/rhel-9-server-byos",
    },
}


def categorize(license_id: str) -> str:
    """Map one license identifier to its category. First match wins."""
    lowered = license_id.lower()
    if "rhel-byos" in lowered:
        return BYOS
    if "rhel-payg" in lowered or "rhel-sap-payg" in lowered:
        return PAYG
    if "marketplace" in lowered:
        return MARKETPLACE
    if "rhel" in lowered:
        return RHEL
    return CUSTOM


def classify(licenses: Iterable[str]) -> LicenseClassification:
    """Classify a flat collection of license identifiers.

    Pure and total: an empty input yields an empty classification with
    every flag False.  Duplicates are kept in ``licenses`` and collapsed
    in ``types``.
    """
    license_list = list(licenses)
    found = {categorize(license_id) for license_id in license_list}
    return LicenseClassification(
        licenses=license_list,
        types=[category for category in CATEGORY_ORDER if category in found],
        is_payg=PAYG in found,
        is_byos=BYOS in found,
        is_marketplace=MARKETPLACE in found,
        is_rhel=bool(found & {RHEL, PAYG, BYOS}),
    )


def classify_disks(disks: Iterable[DiskRecord]) -> LicenseClassification:
    """Classify the licenses of every disk attached to an instance."""
    return classify(license_id for disk in disks for license_id in disk.licenses)


def get_license_url(license_type: str, rhel_version: str) -> str | None:
    """Return the canonical license URL for the pair, or None if unmapped."""
    return LICENSE_URLS.get(license_type, {}).get(rhel_version)


def license_catalog() -> dict:
    """The license table plus the supported types and versions."""
    return {
        "licenses": {kind: dict(urls) for kind, urls in LICENSE_URLS.items()},
        "supported_types": list(SUPPORTED_LICENSE_TYPES),
        "supported_versions": list(SUPPORTED_RHEL_VERSIONS),
    }
