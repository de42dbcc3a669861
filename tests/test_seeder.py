"""Tests for seeding a store from a directory of ticker files.

**Feature: candle-seeding**
"""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from candleseed.config import SeedSettings
from candleseed.db.batch import InsertStats
from candleseed.db.store import CandleStore
from candleseed.exceptions import CandleParseError, CsvFormatError, DataFileError, StoreError
from candleseed.ingest.reader import read_rows
from candleseed.seeder import Seeder, list_csv_files, ticker_from_path

from conftest import AAPL_ROWS, NASDAQ_HEADER, YAHOO_HEADER, write_csv


def make_settings(data_dir: Path, **kwargs) -> SeedSettings:
    return SeedSettings(_env_file=None, DSN=":memory:", data_dir=data_dir, **kwargs)


class FakeStore:
    """In-memory stand-in that records inserts."""

    def __init__(self, existing: set[str] = frozenset()):
        self.existing = set(existing)
        self.inserted: dict[str, list] = {}
        self.sizes: list[tuple[int, int]] = []

    def has_ticker(self, ticker: str) -> bool:
        return ticker in self.existing

    def insert_candles(self, candles, batch_size, statements_per_tx):
        self.sizes.append((batch_size, statements_per_tx))
        self.inserted.setdefault(candles[0].ticker, []).extend(candles)
        return InsertStats(rows=len(candles), statements=1, transactions=1)


class RecordingReader:
    """Reader that remembers which files were opened."""

    def __init__(self):
        self.opened: list[str] = []

    def __call__(self, path: Path):
        self.opened.append(path.name)
        return read_rows(path)


@pytest.fixture
def data_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestEndToEnd:
    """
    *For any* fresh store, seeding AAPL.csv inserts its rows once; a second
    run inserts nothing.
    """

    def test_seed_then_reseed(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, AAPL_ROWS)
        settings_ = make_settings(data_dir)

        with CandleStore(f"sqlite:///{data_dir}/candles.db") as store:
            first = Seeder(settings_, store).run()

            assert first.loaded == ["AAPL"]
            assert first.rows_inserted == 3
            assert store.count() == 3

            candles = store.get_candles("AAPL")
            assert candles[0].date == date(2023, 1, 3)
            assert candles[0].open == 130.28
            assert candles[0].high == 130.90
            assert candles[0].low == 124.17
            assert candles[0].close == 125.07
            assert candles[0].volume == 112117500

            second = Seeder(settings_, store).run()

            assert second.loaded == []
            assert second.skipped == ["AAPL"]
            assert second.rows_inserted == 0
            assert store.count() == 3

    def test_nasdaq_layout(self, data_dir: Path):
        write_csv(
            data_dir / "MSFT.csv",
            NASDAQ_HEADER,
            ["01/03/2023,$239.58,25740040,$243.08,$245.75,$237.40"],
        )
        with CandleStore(":memory:") as store:
            Seeder(make_settings(data_dir, layout="nasdaq"), store).run()

            [candle] = store.get_candles("MSFT")
            assert candle.close == 239.58
            assert candle.open == 243.08
            assert candle.volume == 25740040

    @given(rows=st.integers(min_value=1, max_value=120))
    @settings(max_examples=15, deadline=None)
    def test_row_count_preserved(self, rows: int):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            lines = [
                f"{date.fromordinal(738000 + i).isoformat()},1,2,0.5,1.5,1.5,{i}"
                for i in range(rows)
            ]
            write_csv(tmp / "SPY.csv", YAHOO_HEADER, lines)

            with CandleStore(":memory:") as store:
                report = Seeder(make_settings(tmp, batch_size=7, statements_per_tx=3), store).run()
                assert store.count("SPY") == rows
                assert report.inserts.statements == -(-rows // 7)
                assert report.inserts.transactions == -(-rows // 21)


class TestBatchSettings:
    """Batch sizes come from the run settings, not the store defaults."""

    def test_settings_passed_to_store(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, AAPL_ROWS)
        store = FakeStore()

        Seeder(make_settings(data_dir, batch_size=2, statements_per_tx=4), store).run()

        assert store.sizes == [(2, 4)]

    def test_settings_override_store_defaults(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, AAPL_ROWS)

        with CandleStore(":memory:", batch_size=50, statements_per_tx=10) as store:
            report = Seeder(make_settings(data_dir, batch_size=1, statements_per_tx=2), store).run()

        assert report.inserts.statements == 3
        assert report.inserts.transactions == 2


class TestSkipExisting:
    """A ticker already in the store is never opened and never inserted."""

    def test_existing_ticker_not_opened(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, AAPL_ROWS)
        write_csv(data_dir / "MSFT.csv", YAHOO_HEADER, AAPL_ROWS)
        store = FakeStore(existing={"AAPL"})
        reader = RecordingReader()

        report = Seeder(make_settings(data_dir), store, read_rows=reader).run()

        assert reader.opened == ["MSFT.csv"]
        assert "AAPL" not in store.inserted
        assert len(store.inserted["MSFT"]) == 3
        assert report.skipped == ["AAPL"]
        assert report.loaded == ["MSFT"]

    def test_unreadable_file_of_existing_ticker_is_ignored(self, data_dir: Path):
        (data_dir / "AAPL.csv").write_text('Date\n"unterminated\n')

        report = Seeder(make_settings(data_dir), FakeStore(existing={"AAPL"})).run()

        assert report.skipped == ["AAPL"]


class TestFailures:
    """The first failing ticker stops the run."""

    def test_existence_failure_names_ticker(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, AAPL_ROWS)

        with CandleStore(":memory:") as store:
            store.conn.execute("DROP TABLE candles")
            with pytest.raises(StoreError) as exc_info:
                Seeder(make_settings(data_dir), store).run()

        assert exc_info.value.stage == "query"
        assert "AAPL" in str(exc_info.value)

    def test_malformed_date_leaves_no_rows(self, data_dir: Path):
        rows = AAPL_ROWS[:2] + ["not-a-date,$1,$2,$0.5,$1.5,$1.5,100"]
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, rows)

        with CandleStore(":memory:") as store:
            with pytest.raises(CandleParseError) as exc_info:
                Seeder(make_settings(data_dir), store).run()

            assert exc_info.value.ticker == "AAPL"
            assert exc_info.value.line == 3
            assert store.count("AAPL") == 0

    def test_error_stops_later_tickers(self, data_dir: Path):
        write_csv(data_dir / "AAPL.csv", YAHOO_HEADER, ["bad,1,2,3,4,5,6"])
        write_csv(data_dir / "MSFT.csv", YAHOO_HEADER, AAPL_ROWS)
        store = FakeStore()

        with pytest.raises(CandleParseError):
            Seeder(make_settings(data_dir), store).run()

        assert store.inserted == {}

    def test_malformed_csv(self, data_dir: Path):
        (data_dir / "AAPL.csv").write_text("Date,Open\n2023-01-03\n")

        with pytest.raises(CsvFormatError):
            Seeder(make_settings(data_dir), FakeStore()).run()

    def test_missing_data_dir(self, data_dir: Path):
        with pytest.raises(DataFileError) as exc_info:
            Seeder(make_settings(data_dir / "nope"), FakeStore()).run()
        assert "does not exist" in str(exc_info.value)


class TestDirectoryListing:
    def test_only_csv_files_sorted(self, data_dir: Path):
        (data_dir / "MSFT.csv").write_text("")
        (data_dir / "aapl.CSV").write_text("")
        (data_dir / "README.md").write_text("")
        (data_dir / "archive.csv").mkdir()

        assert [p.name for p in list_csv_files(data_dir)] == ["MSFT.csv", "aapl.CSV"]

    def test_empty_file_reported(self, data_dir: Path):
        (data_dir / "EMPTY.csv").write_text(YAHOO_HEADER + "\n")

        report = Seeder(make_settings(data_dir), FakeStore()).run()

        assert report.empty == ["EMPTY"]
        assert report.loaded == []

    @pytest.mark.parametrize(
        "name, ticker",
        [("AAPL.csv", "AAPL"), ("BRK.B.csv", "BRK.B"), ("spy.CSV", "spy")],
    )
    def test_ticker_from_path(self, name: str, ticker: str):
        assert ticker_from_path(Path("data") / name) == ticker
