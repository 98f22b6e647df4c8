class BuildError(Exception):
    pass


class ConfigError(BuildError):
    pass


class InvalidToolNameError(BuildError):
    pass


class ToolNotFoundError(BuildError):
    pass


class NoSpecFilesFoundError(BuildError):
    pass


class BuildTreeSeedError(BuildError):
    def __init__(self, message: str, failures: int = 1) -> None:
        super().__init__(message)
        self.failures = failures


class PrivilegeNotGrantedError(BuildError):
    pass


class ArtifactNotProducedError(BuildError):
    pass


class SpecNameCollisionError(BuildError):
    pass
