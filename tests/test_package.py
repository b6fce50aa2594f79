"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import allocprep

    assert allocprep.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from allocprep.config import (
        AppConfig,
        DataPathsConfig,
        IngestionConfig,
        LoggingConfig,
        OutputConfig,
        load_config,
    )

    assert AppConfig is not None
    assert DataPathsConfig is not None
    assert IngestionConfig is not None
    assert LoggingConfig is not None
    assert OutputConfig is not None
    assert load_config is not None


def test_schemas_module_imports() -> None:
    """Verify schemas module structure is correct."""
    from allocprep.schemas import (
        CleanedClientSchema,
        CleanedTaskSchema,
        CleanedWorkerSchema,
        Client,
        Task,
        ValidationIssue,
        ValidationSummary,
        Worker,
    )

    assert CleanedClientSchema is not None
    assert CleanedTaskSchema is not None
    assert CleanedWorkerSchema is not None
    assert Client is not None
    assert Task is not None
    assert Worker is not None
    assert ValidationIssue is not None
    assert ValidationSummary is not None
