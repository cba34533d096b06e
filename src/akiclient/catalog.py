"""Static catalog of known API servers.

The catalog maps each supported (language, category) pair to its ordered
endpoint group. It is built once and never mutated; groups are handed out
by reference because their order is significant.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

import yaml

from akiclient.exceptions import UnsupportedCombinationError
from akiclient.models import Category, EndpointGroup, Language

# Declared order is the probing order. Only character groups are known; object
# and animal pairs need a catalog loaded with from_yaml or from_mapping.
DEFAULT_HOSTS: dict[tuple[Language, Category], list[str]] = {
    (Language.ARABIC, Category.CHARACTER): [
        "api-ar2.akinator.com",
        "api-ar3.akinator.com",
    ],
    (Language.CHINESE, Category.CHARACTER): [
        "api-cn1.akinator.com",
        "api-cn3.akinator.com",
    ],
    (Language.DUTCH, Category.CHARACTER): [
        "api-nl2.akinator.com",
        "api-nl3.akinator.com",
    ],
    (Language.ENGLISH, Category.CHARACTER): [
        "api-en1.akinator.com",
        "api-en3.akinator.com",
        "api-en4.akinator.com",
        "api-usa1.akinator.com",
        "api-usa3.akinator.com",
        "api-usa4.akinator.com",
        "api-usa5.akinator.com",
        "api-usa6.akinator.com",
        "api-us3.akinator.com",
        "api-us4.akinator.com",
        "ns623133.ovh.net:8014",
    ],
    (Language.FRENCH, Category.CHARACTER): [
        "api-obj-fr1.akinator.com",
        "api-obj-fr3.akinator.com",
        "ns623133.ovh.net:8030",
    ],
    (Language.GERMAN, Category.CHARACTER): [
        "api-de3.akinator.com",
        "ns623133.ovh.net:8005",
    ],
    (Language.HINDI, Category.CHARACTER): [
        "api-in1.akinator.com",
        "api-in2.akinator.com",
    ],
    (Language.HEBREW, Category.CHARACTER): [
        "ns623133.ovh.net:8006",
    ],
    (Language.ITALIAN, Category.CHARACTER): [
        "api-it2.akinator.com",
        "api-it3.akinator.com",
    ],
    (Language.JAPANESE, Category.CHARACTER): [
        "api-jp2.akinator.com",
        "api-jp3.akinator.com",
        "ns623133.ovh.net:8012",
    ],
    (Language.KOREAN, Category.CHARACTER): [
        "api-kr1.akinator.com",
        "api-kr4.akinator.com",
    ],
    (Language.POLISH, Category.CHARACTER): [
        "api-pl1.akinator.com",
        "api-pl3.akinator.com",
    ],
    (Language.PORTUGUESE, Category.CHARACTER): [
        "api-pt3.akinator.com",
        "api-pt4.akinator.com",
    ],
    (Language.RUSSIAN, Category.CHARACTER): [
        "api-ru1.akinator.com",
        "api-ru3.akinator.com",
        "api-ru4.akinator.com",
    ],
    (Language.SPANISH, Category.CHARACTER): [
        "api-es3.akinator.com",
        "api-es4.akinator.com",
        "ns623133.ovh.net:8013",
    ],
    (Language.TURKISH, Category.CHARACTER): [
        "api-tr1.akinator.com",
        "api-tr3.akinator.com",
    ],
}


class EndpointCatalog:
    """Read-only mapping from (language, category) to an endpoint group.

    Example:
        group = DEFAULT_CATALOG.lookup(Language.ENGLISH, Category.CHARACTER)
    """

    def __init__(self, groups: Mapping[tuple[Language, Category], EndpointGroup]):
        self._groups = MappingProxyType(dict(groups))

    @classmethod
    def from_mapping(
        cls, hosts: Mapping[tuple[Language, Category], list[str]]
    ) -> EndpointCatalog:
        """Build a catalog from host lists keyed by (language, category)."""
        return cls(
            {
                (language, category): EndpointGroup.from_hosts(
                    language, category, list(host_list)
                )
                for (language, category), host_list in hosts.items()
            }
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> EndpointCatalog:
        """Load a catalog from a YAML file.

        The file maps language codes to categories to host lists::

            en:
              character:
                - api-en1.akinator.com
                - api-en3.akinator.com

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If a language, category or host list is invalid.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("Catalog file must be a mapping of languages")

        hosts: dict[tuple[Language, Category], list[str]] = {}
        for language_code, categories in data.items():
            language = Language(str(language_code))
            if not isinstance(categories, dict):
                raise ValueError(f"Categories for {language_code} must be a mapping")
            for category_name, host_list in categories.items():
                if not isinstance(host_list, list) or not host_list:
                    raise ValueError(
                        f"Hosts for {language_code}/{category_name} must be a "
                        "non-empty list"
                    )
                hosts[(language, Category(str(category_name)))] = [
                    str(h) for h in host_list
                ]
        return cls.from_mapping(hosts)

    def lookup(self, language: Language, category: Category) -> EndpointGroup:
        """Return the group registered for a pair.

        Raises:
            UnsupportedCombinationError: If no group is registered.
        """
        group = self._groups.get((language, category))
        if group is None:
            raise UnsupportedCombinationError(language, category)
        return group

    def supports(self, language: Language, category: Category) -> bool:
        return (language, category) in self._groups

    def pairs(self) -> list[tuple[Language, Category]]:
        return list(self._groups)

    def groups(self) -> Iterator[EndpointGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)


DEFAULT_CATALOG = EndpointCatalog.from_mapping(DEFAULT_HOSTS)
