"""Pydantic models for the nail design webhook contract.

These models describe the JSON exchanged with the remote service.  The
client validates every response body against them so the UI layer only ever
sees well-formed objects.

Models
------
CreateDesignRequest
    Body for ``POST nails-creator``.
DesignIdRequest
    Body for ``POST download-image`` and ``DELETE delete-image``.
GeneratedDesign
    Response of ``POST nails-creator``.
NailDesign
    One entry of the ``fetch-nails`` listing.
DownloadPayload
    Response of ``POST download-image``.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CreateDesignRequest(BaseModel):
    """Request body for the ``nails-creator`` endpoint.

    Attributes:
        prompt: Free-text description of the nails to generate.
    """

    prompt: str = Field(..., description="Description of the nail design.")


class DesignIdRequest(BaseModel):
    """Request body that addresses a single design by id."""

    id: str = Field(..., description="Opaque design identifier.")


class GeneratedDesign(BaseModel):
    """A freshly generated design as returned by ``nails-creator``.

    Attributes:
        id: Identifier assigned by the service.
        prompt: The prompt the image was generated from.
        url: URL of the hosted preview image.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    prompt: str = ""
    url: str


class NailDesign(BaseModel):
    """A stored design as listed by ``fetch-nails``.

    The service names its columns ``ID``, ``Prompt``, ``imagenUrl`` and
    ``creadoEn``; those names are accepted alongside the snake_case ones.

    Attributes:
        id: Identifier, unique within one listing.
        prompt: The prompt the image was generated from.
        image_url: URL of the hosted preview image.  May go stale.
        created_at: Creation timestamp as sent by the service (ISO-ish).
    """

    model_config = ConfigDict(coerce_numbers_to_str=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("ID", "id"))
    prompt: str = Field(default="", validation_alias=AliasChoices("Prompt", "prompt"))
    image_url: str = Field(
        default="", validation_alias=AliasChoices("imagenUrl", "imageUrl", "image_url")
    )
    created_at: str = Field(
        default="", validation_alias=AliasChoices("creadoEn", "createdAt", "created_at")
    )

    @field_validator("prompt", "image_url", "created_at", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        # The service sends null for columns it never filled in
        return "" if value is None else value


class DownloadPayload(BaseModel):
    """Response body of ``download-image``.

    Attributes:
        base64: Image bytes encoded as base64, optionally prefixed with a
            ``data:image/<type>;base64,`` header.
    """

    base64: str
