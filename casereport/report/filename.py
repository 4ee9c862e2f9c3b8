from __future__ import annotations

import re
import unicodedata

from casereport.types import ReportMetadata

from .context import require_field


_TRANSLITERATIONS = str.maketrans({
    'æ': 'ae',
    'ø': 'oe',
    'å': 'aa',
    'Æ': 'Ae',
    'Ø': 'Oe',
    'Å': 'Aa',
    'ß': 'ss',
})


def slugify(value: str, *, fallback: str = 'x') -> str:
    token = str(value or '').translate(_TRANSLITERATIONS)
    token = unicodedata.normalize('NFKD', token).encode('ascii', 'ignore').decode('ascii').lower()
    token = re.sub(r'[^a-z0-9]+', '-', token).strip('-')
    return token or fallback


def build_report_filename(metadata: ReportMetadata) -> str:
    case_id = require_field(metadata, 'case_id', section='filename', label='metadata.case_id')
    case_name = getattr(metadata, 'case_name', None) or ''
    version = getattr(metadata, 'report_version', None) or 'v1'
    exported_at = require_field(metadata, 'exported_at', section='filename', label='metadata.exported_at')
    return '_'.join(
        [
            slugify(case_id, fallback='case'),
            slugify(case_name, fallback='unnamed'),
            'case-report',
            exported_at.strftime('%Y%m%d'),
            slugify(version, fallback='v1'),
        ]
    ) + '.pdf'
