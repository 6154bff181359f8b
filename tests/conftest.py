from datetime import datetime, timezone
from pathlib import Path

import pytest

from sasscan.core.models import FileRecord, ScanContext

MAIN_SAS = """\
/* nightly extract, refreshed 2023-06-30 */
libname src oracle user=etl password=abc123 path=prod;
LIBNAME out '/data/out';
proc sql;
  create table out.claims as
  select * from src.claims;
quit;
data _null_;
  set out.claims;
run;
%include "helpers.sas";
proc export data=out.claims outfile='claims.csv' dbms=csv replace;
run;
"""

HELPERS_SAS = """\
%let pw = &password.;
libname db odbc password=&password. dsn=warehouse;
PROC SQL;
  select count(*) from db.members;
QUIT;
"""

UNTERMINATED_SAS = """\
data work.a; set work.b; run;
proc sql;
  select * from work.a;
"""


def make_file_record(path: Path, file_id: str = "file-1") -> FileRecord:
    stamp = datetime(2023, 6, 30, 12, 0, 0, tzinfo=timezone.utc)
    return FileRecord(
        id=file_id,
        name=path.name,
        directory=str(path.parent),
        created_at=stamp,
        modified_at=stamp,
        size_bytes=path.stat().st_size,
    )


@pytest.fixture()
def make_context(tmp_path: Path):
    """Write text (or bytes) to a file and return a ScanContext for it."""

    def _make(content, name: str = "sample.sas", **kwargs) -> ScanContext:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return ScanContext(make_file_record(path), **kwargs)

    return _make


@pytest.fixture()
def sas_tree(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "macros").mkdir(parents=True)
    (root / "macros" / "deep").mkdir()
    (root / "main.sas").write_text(MAIN_SAS, encoding="utf-8")
    (root / "macros" / "helpers.sas").write_text(HELPERS_SAS, encoding="utf-8")
    (root / "macros" / "deep" / "unterminated.sas").write_text(UNTERMINATED_SAS, encoding="utf-8")
    return root


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture()
def record_for():
    """Build a FileRecord for an existing file with fixed timestamps."""
    return make_file_record
