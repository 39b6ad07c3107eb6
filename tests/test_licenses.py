"""Tests for license classification and the license catalogue."""

import pytest

from rhelswap.licenses import (
    LICENSE_URLS,
    categorize,
    classify,
    classify_disks,
    get_license_url,
    license_catalog,
)
from rhelswap.models import DiskRecord

BASE = "https://www.googleapis.com/compute/v1/projects/rhel-cloud/global/licenses"


class TestCategorize:
    @pytest.mark.parametrize(
        "license_id, expected",
        [
            (f"{BASE}/rhel-byos-8", "BYOS"),
            (f"{BASE}/rhel-payg-9", "PAYG"),
            (f"{BASE}/rhel-sap-payg", "PAYG"),
            ("projects/acme/global/licenses/marketplace-widget", "Marketplace"),
            (f"{BASE}/rhel-9-server", "RHEL"),
            ("projects/debian-cloud/global/licenses/debian-12-bookworm", "Custom"),
        ],
    )
    def test_rules(self, license_id, expected):
        assert categorize(license_id) == expected

    def test_case_insensitive(self):
        assert categorize("PROJECTS/RHEL-CLOUD/LICENSES/RHEL-BYOS") == "BYOS"

    def test_byos_beats_marketplace(self):
        assert categorize(f"{BASE}/rhel-byos-marketplace") == "BYOS"

    def test_server_payg_urls_fall_back_to_rhel(self):
        # "rhel-9-server-payg" does not contain the "rhel-payg" substring.
        assert categorize(LICENSE_URLS["PAYG"]["rhel-9"]) == "RHEL"


class TestClassify:
    def test_empty(self):
        result = classify([])
        assert result.licenses == []
        assert result.types == []
        assert not any([result.is_payg, result.is_byos, result.is_marketplace, result.is_rhel])

    def test_payg(self):
        result = classify([f"{BASE}/rhel-payg-8"])
        assert result.types == ["PAYG"]
        assert result.is_payg and result.is_rhel
        assert not result.is_byos

    def test_mixed(self):
        result = classify([
            "projects/debian-cloud/global/licenses/debian-12",
            f"{BASE}/rhel-byos-9",
            "projects/acme/global/licenses/marketplace-addon",
        ])
        assert result.types == ["BYOS", "Marketplace", "Custom"]
        assert result.is_byos and result.is_marketplace and result.is_rhel
        assert not result.is_payg

    def test_duplicates_kept_in_licenses_only(self):
        lic = f"{BASE}/rhel-byos-9"
        result = classify([lic, lic])
        assert result.licenses == [lic, lic]
        assert result.types == ["BYOS"]

    def test_marketplace_alone_is_not_rhel(self):
        result = classify(["projects/acme/global/licenses/marketplace-addon"])
        assert result.is_marketplace
        assert not result.is_rhel

    def test_order_does_not_change_types(self):
        ids = [f"{BASE}/rhel-9-server", f"{BASE}/rhel-payg-9", "custom-license"]
        assert classify(ids).types == classify(list(reversed(ids))).types

    def test_deterministic(self):
        ids = [f"{BASE}/rhel-byos-8", "custom"]
        assert classify(ids) == classify(ids)


class TestClassifyDisks:
    def test_flattens_all_disks(self):
        disks = [
            DiskRecord(device_name="boot", licenses=[f"{BASE}/rhel-payg-8"]),
            DiskRecord(device_name="data", licenses=["projects/x/global/licenses/custom"]),
            DiskRecord(device_name="scratch"),
        ]
        result = classify_disks(disks)
        assert result.licenses == [f"{BASE}/rhel-payg-8", "projects/x/global/licenses/custom"]
        assert result.types == ["PAYG", "Custom"]


class TestCatalogue:
    def test_six_entries(self):
        assert sum(len(v) for v in LICENSE_URLS.values()) == 6

    def test_payg_rhel9(self):
        assert (
            get_license_url("PAYG", "rhel-9")
            == "projects/rhel-cloud/global/licenses/rhel-9-server-payg"
        )

    def test_byos_rhel7(self):
        assert (
            get_license_url("BYOS", "rhel-7")
            == "projects/rhel-cloud/global/licenses/rhel-7-server-byos"
        )

    @pytest.mark.parametrize("kind, version", [("PAYG", "rhel-6"), ("SPLA", "rhel-9")])
    def test_unmapped(self, kind, version):
        assert get_license_url(kind, version) is None

    def test_catalog_payload(self):
        catalog = license_catalog()
        assert catalog["supported_types"] == ["PAYG", "BYOS"]
        assert catalog["supported_versions"] == ["rhel-7", "rhel-8", "rhel-9"]
        catalog["licenses"]["PAYG"]["rhel-9"] = "mutated"
        assert get_license_url("PAYG", "rhel-9") != "mutated"
