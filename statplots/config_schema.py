# Config schema validation
# Plot defaults and validation of the batch runner's YAML config

DEFAULT_DPI = 600
DEFAULT_HEIGHT = 2000
DEFAULT_WIDTH = 4000
DEFAULT_FILENAME = "Plot Output"
DEFAULT_KMAX = 8

SUPPORTED_DIMS = (2, 3)

REQUIRED_KEYS = {
    'data': ['dataset_path'],
}


class ConfigValidationError(Exception):
    """Raised when config validation fails."""
    pass


def validate_config(config):
    """
    Validate plotting configuration.

    Args:
        config: dict - Configuration dictionary

    Raises:
        ConfigValidationError if validation fails
    """
    errors = []

    if not isinstance(config, dict):
        raise ConfigValidationError("Config validation failed:\n  - config must be a mapping")

    for section, required_keys in REQUIRED_KEYS.items():
        if section not in config:
            errors.append(f"Missing required section: '{section}'")
            continue
        for key in required_keys:
            if key not in config[section]:
                errors.append(f"Missing required key: '{section}.{key}'")

    if errors:
        raise ConfigValidationError("Config validation failed:\n  - " + "\n  - ".join(errors))

    output = config.get('output') or {}
    for key in ('dpi', 'height', 'width'):
        if key not in output:
            continue
        value = output[key]
        if not isinstance(value, int) or isinstance(value, bool):
            errors.append(f"output.{key} must be an integer")
        elif value <= 0:
            errors.append(f"output.{key} must be > 0")

    pca = config.get('pca') or {}
    if pca.get('enabled'):
        if not config['data'].get('formula'):
            errors.append("pca.enabled requires 'data.formula'")
        dim = pca.get('dim')
        if dim is not None and dim not in SUPPORTED_DIMS:
            errors.append(f"Invalid pca.dim '{dim}'. Allowed: {list(SUPPORTED_DIMS)} or null")

    elbow = config.get('elbow') or {}
    if 'kmax' in elbow:
        kmax = elbow['kmax']
        if not isinstance(kmax, int) or isinstance(kmax, bool):
            errors.append("elbow.kmax must be an integer")
        elif kmax < 1:
            errors.append("elbow.kmax must be >= 1")
    columns = elbow.get('columns')
    if columns is not None and not isinstance(columns, list):
        errors.append("elbow.columns must be a list of column names")

    if errors:
        raise ConfigValidationError("Config validation failed:\n  - " + "\n  - ".join(errors))

    return True
