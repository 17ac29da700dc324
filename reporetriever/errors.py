class RepoRetrieverError(Exception):
    """Base app error."""


class InvalidReference(RepoRetrieverError):
    """The input is neither a GitHub URL nor an ``owner/repo`` shorthand."""


class TreeFetchFailure(RepoRetrieverError):
    pass


class FileFetchFailure(RepoRetrieverError):
    pass


class EmptySelection(RepoRetrieverError):
    pass


class GenerationInProgress(RepoRetrieverError):
    pass
