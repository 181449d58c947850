class LassoBrowserError(Exception):
    """Base exception for all lasso_browser errors"""
    pass


class ConfigError(LassoBrowserError):
    """Invalid or inconsistent global.json / dataset config"""
    pass


class LoadError(LassoBrowserError):
    """
    Dataset could not be fetched or parsed
    missing file, unreadable CSV, no header row, etc
    """

    def __init__(self, dataset_name: str, message: str):
        self.dataset_name = dataset_name
        super().__init__(f"Could not load dataset '{dataset_name}': {message}")


class AttributeMismatchError(LassoBrowserError):
    """A numeric attribute holds values that do not parse as numbers"""

    def __init__(self, attribute: str, bad_rows: list[int]):
        self.attribute = attribute
        self.bad_rows = bad_rows
        super().__init__(
            f"Attribute '{attribute}' is not numeric for {len(bad_rows)} row(s)"
        )


class LassoStateError(LassoBrowserError):
    """Lasso event received in a state that does not accept it"""
    pass
