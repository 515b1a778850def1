from tests.utils import storage_hub, wishboat  # noqa: F401
