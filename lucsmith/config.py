"""Configuration for predicate evaluation.

Configuration files are YAML or JSON mappings, for example::

    relation_interval: contains
    relation_interval1: equals
    relation_interval2: equals
    remove_column: true
    pixel_resolution: 61.006
    index_base: 1

Workflows and PredicateTask use these values for any predicate argument a
caller leaves unset.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import yaml

from lucsmith.objects.labelset import LabelSet
from lucsmith.primitives.holds import validate_relation
from lucsmith.utils.errors import ParameterError, raise_parameter_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredicateConfig:
    """Defaults applied by PredicateTask and workflows.

    Attributes:
        relation_interval: Relation used by HOLDS, 'equals' or 'contains'.
        relation_interval1: Relation for the first interval of EVOLVE and
            CONVERT. None keeps each predicate's own default.
        relation_interval2: Relation for the second interval of EVOLVE and
            CONVERT. None keeps each predicate's own default.
        remove_column: Strip the first interval's dates from predicate output.
        pixel_resolution: Pixel side length in meters, used by measures.
        index_base: Raster code of the first class label (1 or 0). None keeps
            the index base of the label set passed in.
    """

    relation_interval: str = "contains"
    relation_interval1: Optional[str] = None
    relation_interval2: Optional[str] = None
    remove_column: bool = True
    pixel_resolution: Optional[float] = None
    index_base: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        validate_relation(self.relation_interval, "relation_interval")
        if self.relation_interval1 is not None:
            validate_relation(self.relation_interval1, "relation_interval1")
        if self.relation_interval2 is not None:
            validate_relation(self.relation_interval2, "relation_interval2")
        if not isinstance(self.remove_column, bool):
            raise_parameter_error(
                "remove_column", self.remove_column, valid_values=["true", "false"]
            )
        if self.pixel_resolution is not None and self.pixel_resolution <= 0:
            raise_parameter_error(
                "pixel_resolution", self.pixel_resolution, constraint="must be positive"
            )
        if self.index_base is not None and self.index_base not in (0, 1):
            raise_parameter_error("index_base", self.index_base, valid_values=["0", "1"])

    @classmethod
    def from_dict(cls, values: Optional[dict[str, Any]]) -> "PredicateConfig":
        """Create a configuration from a mapping.

        Raises:
            ParameterError: If the mapping has unknown keys or invalid values.
        """
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ParameterError(
                f"Unknown configuration keys: {unknown}",
                suggestion=f"Valid keys: {', '.join(sorted(known))}",
            )
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def read_mapping_file(file_path: str | Path, kind: str = "config") -> Any:
    """Read a YAML or JSON file chosen by suffix.

    Args:
        file_path: Path to a ``.yaml``, ``.yml`` or ``.json`` file.
        kind: Name used in error messages, e.g. 'config' or 'workflow'.

    Returns:
        Parsed file content.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file format is unsupported.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"{kind.capitalize()} file not found: {file_path}")

    suffix = file_path.suffix.lower()

    with open(file_path) as f:
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(f)
        elif suffix == ".json":
            return json.load(f)
        else:
            raise ValueError(
                f"Unsupported {kind} file format: {suffix}. Use .yaml, .yml, or .json"
            )


def load_config(file_path: str | Path) -> PredicateConfig:
    """Load a PredicateConfig from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file format is unsupported.
        ParameterError: If the configuration is invalid.
    """
    config = PredicateConfig.from_dict(read_mapping_file(file_path, kind="config"))
    logger.info(f"Loaded config from {file_path}")
    return config


def configured_labels(
    labels: Union[LabelSet, Sequence[str]], config: Optional[PredicateConfig] = None
) -> LabelSet:
    """Label set with the configured ``index_base`` applied.

    Args:
        labels: LabelSet or class names in raster code order.
        config: Configuration. A None ``index_base`` keeps the label set's own.

    Returns:
        LabelSet whose codes follow the configuration.
    """
    if not isinstance(labels, LabelSet):
        labels = LabelSet.from_sequence(labels)
    if config is None or config.index_base is None:
        return labels
    if config.index_base == labels.index_base:
        return labels
    return LabelSet(names=labels.names, index_base=config.index_base)


# Step arguments that fall back to configuration when a caller omits them
STEP_DEFAULT_KEYS = (
    "relation_interval",
    "relation_interval1",
    "relation_interval2",
    "remove_column",
)


def step_defaults(
    parameter_names: Sequence[str], config: Optional[PredicateConfig] = None
) -> dict[str, Any]:
    """Configured values for the predicate arguments a step accepts.

    Unset options (None) are left out so each predicate keeps its own default.

    Example:
        >>> step_defaults(["remove_column"], PredicateConfig(remove_column=False))
        {'remove_column': False}
    """
    if config is None:
        return {}
    values = config.to_dict()
    return {
        key: values[key]
        for key in STEP_DEFAULT_KEYS
        if key in parameter_names and values[key] is not None
    }


def get_config_value(key: str, config: Optional[PredicateConfig] = None) -> Any:
    """Read a configuration value by name.

    Args:
        key: Attribute name, e.g. 'pixel_resolution'.
        config: Configuration. Defaults to ``PredicateConfig()``.

    Raises:
        KeyError: If the key is not a configuration attribute.
    """
    config = config or PredicateConfig()
    values = config.to_dict()
    if key not in values:
        raise KeyError(f"Unknown configuration key: {key}")
    return values[key]
