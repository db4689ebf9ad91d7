"""Request headers, OData query parameters and request contexts."""

import copy
from dataclasses import dataclass
from typing import Optional

from .auth import AuthorizedSession


@dataclass(frozen=True)
class DocumentHeaders:
    """Wire names of the headers sent on folder and document calls.

    The defaults match the CivicEngage Document Center. Pass other names for
    deployments that rename them.
    """

    api_key: str = "apikey"
    partition: str = "partition"
    user_api_key: str = "userapikey"

    def for_session(
        self, session: AuthorizedSession, content_type: bool = True
    ) -> dict[str, str]:
        """Build the request headers for an authorized call.

        Args:
            session: Authorized session
            content_type: Whether to include a JSON Content-Type header

        Returns:
            Header dictionary
        """
        headers = {"Accept": "application/json"}
        if content_type:
            headers["Content-Type"] = "application/json"
        headers[self.api_key] = session.api_key
        headers[self.partition] = session.partition
        headers[self.user_api_key] = session.session_id
        return headers


class DocQuery:
    """Optional OData query parameters.

    Each setter overwrites the previous value and returns the query so calls
    can be chained. Values are not validated.

    Example:
        >>> DocQuery().top(5).filter("FolderId eq 7").query()
        '?%24top=5&%24filter=FolderId eq 7'
    """

    # Serialization order of the parameters
    FIELDS = ("top", "skip", "filter", "orderby", "inlinecount", "expand")

    def __init__(self) -> None:
        self._top: Optional[int] = None
        self._skip: Optional[int] = None
        self._filter: Optional[str] = None
        self._orderby: Optional[str] = None
        self._inlinecount: Optional[str] = None
        self._expand: Optional[str] = None

    def top(self, value: int) -> "DocQuery":
        self._top = value
        return self

    def skip(self, value: int) -> "DocQuery":
        self._skip = value
        return self

    def filter(self, value: str) -> "DocQuery":
        self._filter = value
        return self

    def orderby(self, value: str) -> "DocQuery":
        self._orderby = value
        return self

    def inlinecount(self, value: str) -> "DocQuery":
        self._inlinecount = value
        return self

    def expand(self, value: str) -> "DocQuery":
        self._expand = value
        return self

    def get(self, name: str) -> Optional[object]:
        """Return the current value of a parameter, or None if unset."""
        if name not in self.FIELDS:
            raise KeyError(name)
        return getattr(self, f"_{name}")

    def copy(self) -> "DocQuery":
        return copy.copy(self)

    def query(self) -> str:
        """Serialize the set parameters into a query string suffix.

        Returns:
            ``"?"`` followed by ``&``-joined ``%24name=value`` pairs in the
            order top, skip, filter, orderby, inlinecount, expand. Unset
            parameters are omitted; with nothing set the result is ``"?"``.
        """
        args = []
        for name in self.FIELDS:
            value = getattr(self, f"_{name}")
            if value is not None:
                # "$" is the only reserved character in the OData keys
                args.append(f"%24{name}={value}")
        return "?" + "&".join(args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocQuery):
            return NotImplemented
        return all(self.get(name) == other.get(name) for name in self.FIELDS)

    def __repr__(self) -> str:
        set_fields = ", ".join(
            f"{name}={self.get(name)!r}"
            for name in self.FIELDS
            if self.get(name) is not None
        )
        return f"DocQuery({set_fields})"


class DocInfo:
    """Everything needed to call one endpoint: headers, query and base URL.

    The query is copied on construction, so changing the filter of a shared
    DocQuery afterwards does not affect an existing DocInfo. Build a new
    DocInfo for each target folder.
    """

    def __init__(self, headers: DocumentHeaders, query: DocQuery, url: str):
        self.headers = headers
        self.args = query.copy()
        self.url = url

    def query(self) -> str:
        """Full request URL: base URL plus the serialized query."""
        return f"{self.url}{self.args.query()}"

    def item_url(self, item_id: int) -> str:
        """URL of a single record under the base URL."""
        return f"{self.url}/{item_id}"

    def with_filter(self, value: str) -> "DocInfo":
        """Return a copy of this context with a different filter."""
        return DocInfo(self.headers, self.args.copy().filter(value), self.url)

    def __repr__(self) -> str:
        return f"DocInfo(url={self.url!r}, args={self.args!r})"
