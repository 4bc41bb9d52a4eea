"""Unit tests for jar_discovery.loader (archive reader and snapshot builder)."""

from __future__ import annotations

import hashlib
import logging
import textwrap
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from jar_discovery.config import ClassificationPatterns
from jar_discovery.errors import ArchiveReadError
from jar_discovery.loader.archive_reader import ArchiveReader, ZipArchiveReader
from jar_discovery.loader.jar_loader import build_snapshot
from jar_discovery.logging_config import ArchiveContextFilter
from jar_discovery.models.archive import Severity

JarBuilder = Callable[..., Path]

MANIFEST = textwrap.dedent("""\
    Manifest-Version: 1.0
    Main-Class: org.springframework.boot.loader.JarLauncher
    Start-Class: com.example.orders.OrdersApplication
    Spring-Boot-Version: 2.7.0
""")

POM = textwrap.dedent("""\
    <project xmlns="http://maven.apache.org/POM/4.0.0">
        <parent>
            <groupId>org.springframework.boot</groupId>
            <artifactId>spring-boot-starter-parent</artifactId>
            <version>2.7.0</version>
        </parent>
        <groupId>com.example</groupId>
        <artifactId>orders</artifactId>
        <version>1.0.0</version>
        <name>orders-service</name>
    </project>
""")

FAT_JAR_ENTRIES: dict[str, str | bytes] = {
    "META-INF/MANIFEST.MF": MANIFEST,
    "META-INF/maven/com.example/orders/pom.xml": POM,
    "META-INF/maven/com.example/orders/pom.properties": "version=1.0.0\n",
    "BOOT-INF/lib/spring-boot-2.7.0.jar": b"PK\x03\x04",
    "BOOT-INF/lib/jackson-core-2.13.3.jar": b"PK\x03\x04",
    "BOOT-INF/classes/application.yml": "server:\n  port: 9090\n",
    "BOOT-INF/classes/logback-spring.xml": "<configuration/>",
    "BOOT-INF/classes/certs/server.pem": "-----BEGIN CERTIFICATE-----",
    "BOOT-INF/classes/static/index.html": "<html></html>",
    "BOOT-INF/classes/static/ca.pem": "-----BEGIN CERTIFICATE-----",
    "BOOT-INF/classes/com/example/orders/OrdersApplication.class": b"\xca\xfe\xba\xbe",
}


class ListArchiveReader:
    """In-memory reader that can fail after a given number of entries."""

    def __init__(self, entries: list[tuple[str, bytes]], *, fail_after: int | None = None, error=None) -> None:
        self._entries = entries
        self._fail_after = fail_after
        self._error = error or ArchiveReadError("failed to read file broken.txt from archive", entry="broken.txt")

    @property
    def location(self) -> str:
        return "memory://test.jar"

    @property
    def size(self) -> int:
        return 10

    @property
    def last_modified(self) -> datetime:
        return datetime(2024, 6, 1, tzinfo=UTC)

    def checksum(self) -> str:
        return "deadbeef"

    def entries(self) -> Iterator[tuple[str, bytes]]:
        for idx, entry in enumerate(self._entries):
            if self._fail_after is not None and idx >= self._fail_after:
                raise self._error
            yield entry


# ---------------------------------------------------------------------------
# ZipArchiveReader
# ---------------------------------------------------------------------------


class TestZipArchiveReader:
    def test_satisfies_protocol(self, build_jar: JarBuilder):
        reader = ZipArchiveReader(build_jar({"a.txt": "a"}))
        assert isinstance(reader, ArchiveReader)

    def test_file_metadata(self, build_jar: JarBuilder):
        path = build_jar({"a.txt": "a"})
        reader = ZipArchiveReader(path)
        assert reader.location == str(path)
        assert reader.size == path.stat().st_size
        assert reader.last_modified.tzinfo is not None
        assert reader.checksum() == hashlib.sha256(path.read_bytes()).hexdigest()

    def test_location_override(self, build_jar: JarBuilder):
        reader = ZipArchiveReader(build_jar({"a.txt": "a"}), location="s3://bucket/app.jar")
        assert reader.location == "s3://bucket/app.jar"

    def test_entries_skip_directories(self, build_jar: JarBuilder):
        reader = ZipArchiveReader(build_jar({"static/": "", "static/app.css": "body {}"}))
        assert list(reader.entries()) == [("static/app.css", b"body {}")]

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ArchiveReadError, match="failed to stat archive"):
            ZipArchiveReader(tmp_path / "missing.jar")

    def test_not_a_zip_raises_on_read(self, tmp_path: Path):
        path = tmp_path / "broken.jar"
        path.write_bytes(b"this is not a zip archive")
        reader = ZipArchiveReader(path)
        with pytest.raises(ArchiveReadError) as exc_info:
            list(reader.entries())
        assert exc_info.value.severity == Severity.ERROR


# ---------------------------------------------------------------------------
# build_snapshot
# ---------------------------------------------------------------------------


class TestBuildSnapshot:
    def test_fat_jar_buckets(self, build_jar: JarBuilder):
        path = build_jar(FAT_JAR_ENTRIES, name="orders-service.jar")
        snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())

        assert snapshot.location == str(path)
        assert snapshot.size == path.stat().st_size
        assert snapshot.checksum == hashlib.sha256(path.read_bytes()).hexdigest()
        assert snapshot.manifest_fields["Spring-Boot-Version"] == "2.7.0"
        assert snapshot.dependencies == ("spring-boot-2.7.0.jar", "jackson-core-2.13.3.jar")
        assert snapshot.application_config_files == {"BOOT-INF/classes/application.yml": "server:\n  port: 9090\n"}
        assert list(snapshot.logging_config_files) == ["BOOT-INF/classes/logback-spring.xml"]
        assert snapshot.certificate_paths == ("BOOT-INF/classes/certs/server.pem", "BOOT-INF/classes/static/ca.pem")
        assert snapshot.static_asset_paths == ("BOOT-INF/classes/static/index.html", "BOOT-INF/classes/static/ca.pem")
        assert snapshot.issues == ()

    def test_build_descriptor_parsed(self, build_jar: JarBuilder):
        snapshot = build_snapshot(ZipArchiveReader(build_jar(FAT_JAR_ENTRIES)), ClassificationPatterns())
        assert snapshot.build_descriptor is not None
        assert snapshot.build_descriptor.name == "orders-service"
        assert snapshot.build_descriptor.parent.version == "2.7.0"

    def test_no_pom_is_absent(self, build_jar: JarBuilder):
        path = build_jar({"META-INF/MANIFEST.MF": "Main-Class: com.example.Main\n"})
        snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())
        assert snapshot.build_descriptor is None
        assert snapshot.issues == ()

    def test_no_manifest(self, build_jar: JarBuilder):
        snapshot = build_snapshot(ZipArchiveReader(build_jar({"a.txt": "a"})), ClassificationPatterns())
        assert snapshot.manifest_fields == {}

    def test_malformed_pom_is_warning(self, build_jar: JarBuilder, caplog: pytest.LogCaptureFixture):
        pom_path = "META-INF/maven/com.example/orders/pom.xml"
        path = build_jar({pom_path: "<project><name>broken", "BOOT-INF/lib/spring-boot-2.7.0.jar": b""})

        with caplog.at_level(logging.WARNING, logger="jar_discovery.loader.jar_loader"):
            snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())

        assert snapshot.build_descriptor is None
        assert snapshot.dependencies == ("spring-boot-2.7.0.jar",)
        assert len(snapshot.issues) == 1
        assert snapshot.issues[0].severity == Severity.WARNING
        assert snapshot.issues[0].entry == pom_path
        assert any("unable to read pom.xml" in r.getMessage() for r in caplog.records)

    def test_log_records_are_attributed_to_archive(self, caplog: pytest.LogCaptureFixture):
        reader = ListArchiveReader([("META-INF/maven/com.example/orders/pom.xml", b"<project>")])
        caplog.handler.addFilter(ArchiveContextFilter())
        with caplog.at_level(logging.DEBUG, logger="jar_discovery"):
            build_snapshot(reader, ClassificationPatterns())
        loader_records = [r for r in caplog.records if r.name == "jar_discovery.loader.jar_loader"]
        assert loader_records
        assert all(r.archive == "memory://test.jar" for r in loader_records)  # type: ignore[attr-defined]

    def test_first_pom_wins(self, build_jar: JarBuilder):
        other = POM.replace("orders-service", "shaded-lib")
        path = build_jar(
            {
                "META-INF/maven/com.example/orders/pom.xml": POM,
                "META-INF/maven/com.example/shaded/pom.xml": other,
            }
        )
        snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())
        assert snapshot.build_descriptor is not None
        assert snapshot.build_descriptor.name == "orders-service"

    def test_war_library_path(self, build_jar: JarBuilder):
        path = build_jar({"WEB-INF/lib/commons-io-2.11.0.jar": b"", "WEB-INF/lib/readme.txt": "x"})
        snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())
        assert snapshot.dependencies == ("commons-io-2.11.0.jar",)

    def test_custom_patterns(self, build_jar: JarBuilder):
        path = build_jar({"BOOT-INF/classes/service.conf": "port=1", "BOOT-INF/classes/application.yml": "a: 1"})
        patterns = ClassificationPatterns(app_config_patterns=(r"^service\.conf$",))
        snapshot = build_snapshot(ZipArchiveReader(path), patterns)
        assert list(snapshot.application_config_files) == ["BOOT-INF/classes/service.conf"]

    def test_snapshot_is_frozen(self, build_jar: JarBuilder):
        snapshot = build_snapshot(ZipArchiveReader(build_jar({"a.txt": "a"})), ClassificationPatterns())
        with pytest.raises(ValidationError):
            snapshot.location = "elsewhere"  # type: ignore[misc]

    def test_snapshot_mappings_are_read_only(self, build_jar: JarBuilder):
        path = build_jar(
            {
                "META-INF/MANIFEST.MF": "Main-Class: com.example.Main\n",
                "BOOT-INF/classes/application.properties": "server.port=9090\n",
            }
        )
        snapshot = build_snapshot(ZipArchiveReader(path), ClassificationPatterns())
        for mapping in (
            snapshot.manifest_fields,
            snapshot.application_config_files,
            snapshot.logging_config_files,
        ):
            with pytest.raises(TypeError):
                mapping["injected"] = "x"  # type: ignore[index]
        assert snapshot.logging_config_files == {}

    def test_snapshot_dumps_mappings_as_dicts(self, build_jar: JarBuilder):
        path = build_jar({"META-INF/MANIFEST.MF": "Main-Class: com.example.Main\n"})
        dumped = build_snapshot(ZipArchiveReader(path), ClassificationPatterns()).model_dump()
        assert dumped["manifest_fields"] == {"Main-Class": "com.example.Main"}
        assert type(dumped["manifest_fields"]) is dict

    def test_read_failure_propagates(self, caplog: pytest.LogCaptureFixture):
        reader = ListArchiveReader([("a.txt", b"a"), ("broken.txt", b"")], fail_after=1)
        with caplog.at_level(logging.ERROR, logger="jar_discovery.loader.jar_loader"):
            with pytest.raises(ArchiveReadError) as exc_info:
                build_snapshot(reader, ClassificationPatterns())
        assert exc_info.value.entry == "broken.txt"
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_os_error_is_wrapped(self):
        reader = ListArchiveReader([("a.txt", b"a")], fail_after=0, error=OSError("disk gone"))
        with pytest.raises(ArchiveReadError, match="disk gone"):
            build_snapshot(reader, ClassificationPatterns())

    def test_not_a_zip_propagates(self, tmp_path: Path):
        path = tmp_path / "broken.jar"
        path.write_bytes(b"garbage")
        with pytest.raises(ArchiveReadError):
            build_snapshot(ZipArchiveReader(path), ClassificationPatterns())

    def test_in_memory_reader(self):
        reader = ListArchiveReader([("META-INF/MANIFEST.MF", b"Main-Class: com.example.Main\n")])
        snapshot = build_snapshot(reader, ClassificationPatterns())
        assert snapshot.location == "memory://test.jar"
        assert snapshot.checksum == "deadbeef"
        assert snapshot.manifest_fields == {"Main-Class": "com.example.Main"}
