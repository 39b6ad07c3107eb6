from typing import Literal


existing_components = Literal[
    "directory",
    "store",
    "notifier",
]


existing_providers = Literal["gcp", "local"]


license_types = Literal["PAYG", "BYOS"]


rhel_versions = Literal["rhel-7", "rhel-8", "rhel-9"]
