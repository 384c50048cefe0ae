"""Value objects describing an index as reported by the engine.

Immutable (frozen) so callers can pass them around without defensive copies.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from redisearch_client.schema import (
    FieldType,
    GeoField,
    NumericField,
    Schema,
    SchemaField,
    TagField,
    TextField,
)


class FieldInfo(BaseModel):
    """One schema field as reported by FT.INFO."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    weight: float | None = None
    separator: str | None = None
    flags: list[str] = Field(default_factory=list)

    @property
    def sortable(self) -> bool:
        return "SORTABLE" in self.flags

    @property
    def no_index(self) -> bool:
        return "NOINDEX" in self.flags

    def to_schema_field(self) -> SchemaField | None:
        """Rebuild the schema field; ``None`` for types this client does not model."""
        try:
            field_type = FieldType(self.type.upper())
        except ValueError:
            return None
        if field_type == FieldType.TEXT:
            return TextField(self.name, sortable=self.sortable, no_index=self.no_index, weight=self.weight or 1.0)
        if field_type == FieldType.NUMERIC:
            return NumericField(self.name, sortable=self.sortable, no_index=self.no_index)
        if field_type == FieldType.TAG:
            return TagField(self.name, no_index=self.no_index, separator=self.separator or ",")
        return GeoField(self.name, no_index=self.no_index)


class IndexInfo(BaseModel):
    """Index statistics and schema returned by FT.INFO.

    Size figures are in megabytes. Averages are NaN on an empty index.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    options: list[str] = Field(default_factory=list)
    fields: list[FieldInfo] = Field(default_factory=list)
    num_docs: int = 0
    max_doc_id: int = 0
    num_terms: int = 0
    num_records: int = 0
    inverted_sz_mb: float = 0.0
    offset_vectors_sz_mb: float = 0.0
    doc_table_size_mb: float = 0.0
    key_table_size_mb: float = 0.0
    records_per_doc_avg: float = 0.0
    bytes_per_record_avg: float = 0.0
    offsets_per_term_avg: float = 0.0
    offset_bits_per_record_avg: float = 0.0
    extra: dict[str, Any] = Field(default_factory=dict)

    def to_schema(self) -> Schema:
        schema = Schema()
        for info in self.fields:
            schema_field = info.to_schema_field()
            if schema_field is not None:
                schema.add_field(schema_field)
        return schema
