from __future__ import annotations

from typing import Any, Generic, Iterator, Optional, TypeVar


T = TypeVar("T")


class Content(Generic[T]):
    """
    Decoded body of a remote object together with the validation token it came with.

    - Read-only: the token and body are fixed at construction.
    - Attribute access, `len()`, iteration, indexing and `in` are forwarded to
      the body, so `content.upper()` works when the body is a `str`.
    - `validation_token` is `None` when the store did not return one; it is
      opaque and never compared locally.
    """

    __slots__ = ("_validation_token", "_body")

    def __init__(self, validation_token: Optional[str], body: T) -> None:
        object.__setattr__(self, "_validation_token", validation_token)
        object.__setattr__(self, "_body", body)

    @property
    def validation_token(self) -> Optional[str]:
        return self._validation_token

    @property
    def body(self) -> T:
        return self._body

    def into_owned_body(self) -> T:
        """Return the body alone, for callers that no longer need to revalidate."""
        return self._body

    # -------- Transparent delegation --------
    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found on Content itself; protocol names
        # (__deepcopy__, __getstate__, ...) must resolve on Content, not the body
        if name in Content.__slots__ or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        return getattr(self._body, name)

    def __reduce__(self) -> Any:
        return (Content, (self._validation_token, self._body))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Content is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Content is read-only")

    def __len__(self) -> int:
        return len(self._body)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._body)  # type: ignore[call-overload]

    def __getitem__(self, item: Any) -> Any:
        return self._body[item]  # type: ignore[index]

    def __contains__(self, item: Any) -> bool:
        return item in self._body  # type: ignore[operator]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Content):
            return (
                self._validation_token == other._validation_token
                and self._body == other._body
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Content(validation_token={self._validation_token!r}, body={self._body!r})"
