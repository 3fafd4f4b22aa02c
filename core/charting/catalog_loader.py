"""Load extra plugin descriptors from YAML catalog files.

Files are listed explicitly in `CHART_ENGINE["CATALOG_FILES"]`; nothing is
discovered by scanning directories. A file holds either a list of descriptor
mappings or a mapping with a `plugins` list:

    plugins:
      - id: custom-bar
        display_name: Custom Bar
        category: basic
        library: echarts
        config_schema:
          xField: {kind: string, required: true, binds_column: true}
          yField: {kind: string, required: true, binds_column: true}
        data_requirements:
          min_columns: 2
          required_semantic_fields: [xField, yField]
        params: {chart_type: bar, category_key: xField, value_key: yField}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

import yaml

from engine.codec import decode_descriptor
from engine.descriptors import PluginDescriptor
from engine.errors import InvalidDescriptorError


def load_catalog_file(path: str | Path) -> tuple[PluginDescriptor, ...]:
    """Decode every descriptor in one YAML catalog file.

    Args:
        path: Catalog file path.

    Returns:
        Descriptors in file order.

    Raises:
        FileNotFoundError: When the file does not exist.
        InvalidDescriptorError: When the file or an entry is malformed.
    """

    catalog_path = Path(path)
    with catalog_path.open(encoding="utf-8") as handle:
        try:
            document = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise InvalidDescriptorError(str(catalog_path), f"is not valid YAML: {exc}") from exc

    if document is None:
        return ()
    entries = document.get("plugins") if isinstance(document, Mapping) else document
    if not isinstance(entries, list):
        raise InvalidDescriptorError(str(catalog_path), "must contain a list of plugins.")
    descriptors: list[PluginDescriptor] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise InvalidDescriptorError(str(catalog_path), "plugin entries must be mappings.")
        descriptors.append(decode_descriptor(entry))
    return tuple(descriptors)


def load_catalog_files(paths: Iterable[str | Path]) -> tuple[PluginDescriptor, ...]:
    """Decode descriptors from several catalog files, in order."""

    descriptors: list[PluginDescriptor] = []
    for path in paths:
        descriptors.extend(load_catalog_file(path))
    return tuple(descriptors)
