"""
Snippetbox — Form Classes and Form Decoder
===========================================

What:  Typed form dataclasses for each submission, plus the decoder that fills
       them from submitted key/value pairs.
How:   Each form field is bound to a form key through dataclass metadata
       (`form="title"`; the attribute name when absent; `form="-"` to skip).
       Values are coerced to the annotated type with a pydantic TypeAdapter.

Failure modes:
    MalformedFormError         : the user's input is bad (→ 400)
    InvalidDecoderTargetError  : the form class is bad (programmer error, → 500)
"""

import dataclasses
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from snippetbox.exceptions import InvalidDecoderTargetError, MalformedFormError
from snippetbox.validator import Validator

logger = logging.getLogger(__name__)

F = TypeVar("F", bound="Form")

SKIP = "-"


# ══════════════════════════════════════════════════════════════════════════
# Forms
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class Form:
    """
    Base for every submitted form: owns a Validator by composition and exposes
    it through the Validatable capability (check_field / add_field_error /
    valid / field_errors).
    """

    validator: Validator = field(
        default_factory=Validator, repr=False, metadata={"form": SKIP}
    )

    @property
    def field_errors(self) -> Dict[str, str]:
        return self.validator.field_errors

    @property
    def non_field_errors(self) -> List[str]:
        return self.validator.non_field_errors

    def check_field(self, ok: bool, key: str, message: str) -> None:
        self.validator.check_field(ok, key, message)

    def add_field_error(self, key: str, message: str) -> None:
        self.validator.add_field_error(key, message)

    def add_non_field_error(self, message: str) -> None:
        self.validator.add_non_field_error(message)

    def valid(self) -> bool:
        return self.validator.valid()


@dataclass
class SnippetCreateForm(Form):
    title: str = field(default="", metadata={"form": "title"})
    content: str = field(default="", metadata={"form": "content"})
    expires: int = field(default=0, metadata={"form": "expires"})


@dataclass
class UserSignupForm(Form):
    name: str = field(default="", metadata={"form": "name"})
    email: str = field(default="", metadata={"form": "email"})
    password: str = field(default="", metadata={"form": "password"})


@dataclass
class UserLoginForm(Form):
    email: str = field(default="", metadata={"form": "email"})
    password: str = field(default="", metadata={"form": "password"})


# ══════════════════════════════════════════════════════════════════════════
# Decoder
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class _Binding:
    attr: str
    key: str
    adapter: TypeAdapter
    many: bool
    text: bool


class FormDecoder:
    """
    Populates form dataclasses from submitted values.

    Bindings for a form class are worked out on first use and cached, so a
    misconfigured form class fails the first time it is decoded. The cache is
    only ever added to and a duplicate computation is harmless, so the decoder
    is safe to share between concurrent requests.
    """

    def __init__(self) -> None:
        self._bindings: Dict[type, Tuple[_Binding, ...]] = {}

    def _bind(self, form_cls: type) -> Tuple[_Binding, ...]:
        cached = self._bindings.get(form_cls)
        if cached is not None:
            return cached

        if not (isinstance(form_cls, type) and dataclasses.is_dataclass(form_cls)):
            raise InvalidDecoderTargetError(
                f"form target must be a dataclass type, got {form_cls!r}"
            )

        try:
            hints = typing.get_type_hints(form_cls)
        except (NameError, TypeError) as e:
            raise InvalidDecoderTargetError(
                f"cannot resolve field types of {form_cls.__name__}: {e}"
            ) from e

        bindings = []
        for f in dataclasses.fields(form_cls):
            key = f.metadata.get("form", f.name)
            if key == SKIP or not f.init:
                continue
            annotation = hints[f.name]
            many = typing.get_origin(annotation) is list
            try:
                adapter = TypeAdapter(annotation)
            except PydanticSchemaGenerationError as e:
                raise InvalidDecoderTargetError(
                    f"{form_cls.__name__}.{f.name}: cannot decode into {annotation!r}"
                ) from e
            bindings.append(
                _Binding(
                    attr=f.name,
                    key=key,
                    adapter=adapter,
                    many=many,
                    text=annotation is str,
                )
            )

        result = tuple(bindings)
        self._bindings[form_cls] = result
        return result

    def decode(self, values: Mapping[str, Any], form_cls: Type[F]) -> F:
        """
        Build a `form_cls` instance from submitted values.

        Args:
            values: Starlette FormData / QueryParams, or any mapping of key → str
                    (or key → list of str).
            form_cls: A dataclass form type.

        Raises:
            MalformedFormError: a submitted value does not fit its field type.
            InvalidDecoderTargetError: form_cls itself cannot be decoded into.
        """
        kwargs: Dict[str, Any] = {}
        for binding in self._bind(form_cls):
            submitted = _get_all(values, binding.key)
            if not submitted:
                continue

            if binding.many:
                raw: Any = submitted
            else:
                raw = submitted[0]
                # Empty input leaves a non-text field at its default, so the
                # validation rules (not the decoder) report it
                if raw == "" and not binding.text:
                    continue

            try:
                kwargs[binding.attr] = binding.adapter.validate_python(raw)
            except PydanticValidationError as e:
                raise MalformedFormError(
                    message=f"invalid value for form field '{binding.key}'",
                    field=binding.key,
                    context={"errors": e.errors(include_url=False)},
                ) from e

        return form_cls(**kwargs)


def _get_all(values: Mapping[str, Any], key: str) -> List[Any]:
    getlist = getattr(values, "getlist", None)
    if getlist is not None:
        return list(getlist(key))
    value = values.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


async def decode_post_form(
    request: Request, form_cls: Type[F], decoder: Optional[FormDecoder] = None
) -> F:
    """
    Parse the request body and decode it into `form_cls`.

    Raises:
        MalformedFormError: the body could not be parsed or decoded.
        InvalidDecoderTargetError: form_cls is misconfigured. Never caught here.
    """
    decoder = decoder or FormDecoder()
    try:
        values = await request.form()
    except (MultiPartException, ValueError) as e:
        raise MalformedFormError(
            message="request body is not a valid form",
            context={"error_type": type(e).__name__},
        ) from e

    try:
        return decoder.decode(values, form_cls)
    except InvalidDecoderTargetError:
        logger.critical("Form class %s cannot be decoded", form_cls.__name__)
        raise
