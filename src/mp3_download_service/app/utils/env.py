import os


def get_or_raise_env(variable_name: str) -> str:
    """Get an environment variable or raises an error if it's not found."""
    value = os.getenv(variable_name)
    if value is None:
        raise ValueError(f"Environment variable {variable_name} not set")
    return value


def get_env(variable_name: str, default: str) -> str:
    """Get an environment variable, falling back to `default` when unset or empty."""
    return os.getenv(variable_name) or default


def get_list_env(variable_name: str, default: list[str]) -> list[str]:
    """Read a comma separated environment variable as a list of stripped values."""
    raw = os.getenv(variable_name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]
