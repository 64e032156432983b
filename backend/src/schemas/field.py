"""Pydantic schemas for field settings."""
from pydantic import BaseModel, ConfigDict, Field


class ManyToManyFieldSettings(BaseModel):
    """
    Settings of a many-to-many field.

    The field shows, on the target side, the entries of `source_section_uid`
    that point at the element through the relation field `single_field_uid`.
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    source_section_uid: str = Field(min_length=1, alias='source')
    single_field_uid: str = Field(min_length=1, alias='singleField')
