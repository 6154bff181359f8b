import pytest

from sasscan.core.config import ScanConfig
from sasscan.core.scanner import DirectoryScanner
from sasscan.scanners.aggregate import LineCount

QUIET = ScanConfig(show_progress=False)


def payloads(result, name, scanner_name):
    record = next(r for r in result.records if r.name == name)
    return [f.payload for f in result.findings_for(record.id) if f.scanner_name == scanner_name]


def test_scan_tree_end_to_end(sas_tree):
    result = DirectoryScanner(sas_tree, config=QUIET).scan()

    assert [r.name for r in result.records] == ["unterminated.sas", "helpers.sas", "main.sas"]
    assert result.stats.files == 3
    assert result.stats.errors == 0
    assert result.stats.findings == len(result.findings)

    assert payloads(result, "main.sas", "line_count") == ["13"]
    assert payloads(result, "main.sas", "sql_count") == ["1"]
    assert payloads(result, "main.sas", "get_sql") == [
        "(4, proc sql;\n  create table out.claims as\n  select * from src.claims;\nquit;)"
    ]
    assert payloads(result, "main.sas", "get_libname") == [
        "(2, libname src oracle user=etl password=abc123 path=prod;)",
        "(3, LIBNAME out '/data/out';)",
    ]
    assert payloads(result, "main.sas", "get_password") == [
        "(2, LIBNAMESRCORACLEUSER=ETLPASSWORD=ABC123PATH=PROD;)"
    ]
    assert payloads(result, "main.sas", "export_count") == ["1"]
    assert payloads(result, "main.sas", "null_count") == ["1"]
    assert payloads(result, "main.sas", "find_date") == ["(1, /* nightly extract, refreshed 2023-06-30 */)"]
    assert payloads(result, "main.sas", "find_file_name") == ['(11, %include "helpers.sas";)']

    assert payloads(result, "helpers.sas", "get_password") == []
    assert payloads(result, "helpers.sas", "get_sql") == [
        "(3, PROC SQL;\n  select count(*) from db.members;\nQUIT;)"
    ]


def test_unterminated_block_diverges_between_sql_scanners(sas_tree):
    result = DirectoryScanner(sas_tree, config=QUIET).scan()

    assert payloads(result, "unterminated.sas", "sql_count") == ["0"]
    assert payloads(result, "unterminated.sas", "get_sql") == []


def test_every_finding_references_a_record(sas_tree):
    result = DirectoryScanner(sas_tree, config=QUIET).scan()
    ids = {r.id for r in result.records}
    assert result.findings
    assert all(f.file_id in ids for f in result.findings)


def test_rescan_gives_identical_detail_rows(sas_tree):
    def rows():
        result = DirectoryScanner(sas_tree, config=QUIET).scan()
        names = {r.id: str(r.path) for r in result.records}
        return [(names[f.file_id], f.scanner_name, f.payload) for f in result.findings]

    assert rows() == rows()


def test_selector_and_known_names(sas_tree):
    scanner = DirectoryScanner(
        sas_tree,
        selector="find_file_name,line_count",
        known_names=["out.claims"],
        config=QUIET,
    )
    result = scanner.scan()

    assert {f.scanner_name for f in result.findings} == {"line_count", "find_file_name"}
    assert payloads(result, "main.sas", "find_file_name") == [
        "(5,   create table out.claims as)",
        "(9,   set out.claims;)",
        "(12, proc export data=out.claims outfile='claims.csv' dbms=csv replace;)",
    ]


def test_explicit_scanner_list(sas_tree):
    result = DirectoryScanner(sas_tree, scanners=[LineCount()], config=QUIET).scan()
    assert [f.payload for f in result.findings] == ["3", "5", "13"]


def test_bad_file_does_not_stop_the_run(sas_tree):
    (sas_tree / "macros" / "binary.sas7bdat").write_bytes(b"\x00\x01\xff\xfe" * 16)

    result = DirectoryScanner(sas_tree, config=QUIET).scan()

    bad = payloads(result, "binary.sas7bdat", "line_count")
    assert len(bad) == 1 and bad[0].startswith("ERROR(EncodingError)")
    assert result.stats.errors == 9
    assert payloads(result, "main.sas", "line_count") == ["13"]


def test_selector_applies_to_explicit_scanner_list(sas_tree):
    from sasscan.core.loader import build_scanners

    scanner = DirectoryScanner(sas_tree, scanners=build_scanners(), selector="null_count", config=QUIET)
    result = scanner.scan()

    assert {f.scanner_name for f in result.findings} == {"null_count"}
    assert payloads(result, "main.sas", "null_count") == ["1"]


def test_unknown_selector_with_explicit_scanners_raises(sas_tree):
    with pytest.raises(ValueError, match="get_sql"):
        DirectoryScanner(sas_tree, scanners=[LineCount()], selector="get_sql", config=QUIET)


def test_max_bytes_limits_each_file(sas_tree):
    result = DirectoryScanner(sas_tree, config=ScanConfig(show_progress=False, max_bytes=100)).scan()

    assert payloads(result, "unterminated.sas", "line_count") == ["3"]
    assert payloads(result, "main.sas", "line_count")[0].startswith("ERROR(IoError): file exceeds 100 bytes")
