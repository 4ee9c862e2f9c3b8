from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'Intel24 Case Report Export'

    output_dir: Path = Field(
        default=Path('./exports'),
        validation_alias=AliasChoices('REPORT_OUTPUT_DIR', 'EXPORT_DIR', 'OUTPUT_DIR'),
    )
    # Append export_started / export_completed / export_failed rows to events.jsonl
    record_export_events: bool = True

    # Brand strings printed in page headers and footers
    brand_name: str = 'Intel24 Data Intel™'
    brand_short_name: str = 'Intel24'
    brand_suite: str = 'Executive Intelligence Brief'

    # Metadata defaults applied when the caller leaves them out
    default_exported_by: str = 'Intel24 Operator'
    default_report_version: str = 'v1'
    default_classification: str = 'INTERN / FORTROLIG'
    timestamp_format: str = '%d.%m.%Y %H:%M'

    # PDF layout
    pdf_page_format: str = Field(
        default='A4',
        validation_alias=AliasChoices('PDF_PAGE_FORMAT', 'PDF_PAGE_SIZE'),
    )
    pdf_font_name: str = 'helvetica'
    pdf_page_margin: float = 56
    pdf_line_height: float = 16
    pdf_section_spacing: float = 32
    pdf_column_gap: float = 28
    pdf_title_block: float = 36
    pdf_divider_gap: float = 12
    pdf_heading_font_size: float = 20
    pdf_subheading_font_size: float = 14
    pdf_title_font_size: float = 12
    pdf_body_font_size: float = 10
    pdf_small_font_size: float = 8


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    settings.output_dir.mkdir(parents=True, exist_ok=True)
    return settings
