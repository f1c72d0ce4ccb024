"""Bundled "university" sample dataset.

Seven small tables (professors, students, lectures, prerequisites, enrolments,
exams, assistants) used to generate Parquet fixtures for database test suites.
Column names and values are kept in their original German.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from .batch import TableSpec
from .columns import Integer, Varchar

__all__ = ["UNIVERSITY_TABLE_NAMES", "university_tables"]

UNIVERSITY_TABLE_NAMES = (
    "professoren",
    "studenten",
    "vorlesungen",
    "vorraussetzen",
    "hoeren",
    "pruefen",
    "assistenten",
)


def university_tables(out_dir: str | Path) -> List[TableSpec]:
    """Return the sample tables with destinations under ``out_dir``."""

    out_dir = Path(out_dir)
    return [
        TableSpec(
            out_dir / "professoren.parquet",
            """
            message schema {
                required int32 PersNr;
                required byte_array Name (UTF8);
                required byte_array Rang (UTF8);
                required int32 Raum;
            }
            """,
            [
                Integer([2125, 2126, 2127, 2133, 2134, 2136, 2137]),
                Varchar(
                    ["Sokrates", "Russel", "Kopernikus", "Popper", "Augustinus", "Curie", "Kant"]
                ),
                Varchar(["C4", "C4", "C3", "C3", "C3", "C4", "C4"]),
                Integer([226, 232, 310, 52, 309, 36, 7]),
            ],
        ),
        TableSpec(
            out_dir / "studenten.parquet",
            """
            message schema {
                required int32 MatrNr;
                required byte_array Name (UTF8);
                required int32 Semester;
            }
            """,
            [
                Integer([24002, 25403, 26120, 26830, 27550, 28106, 29120, 29555]),
                Varchar(
                    [
                        "Xenokrates",
                        "Jonas",
                        "Fichte",
                        "Aristoxenos",
                        "Schopenhauer",
                        "Carnap",
                        "Theophrastos",
                        "Feuerbach",
                    ]
                ),
                Integer([18, 12, 10, 8, 6, 3, 2, 2]),
            ],
        ),
        TableSpec(
            out_dir / "vorlesungen.parquet",
            """
            message schema {
                required int32 VorlNr;
                required byte_array Titel (UTF8);
                required int32 SWS;
                required int32 gelesenVon;
            }
            """,
            [
                Integer([5001, 5041, 5043, 5049, 4052, 5052, 5216, 5259, 5022, 4630]),
                Varchar(
                    [
                        "Grundzüge",
                        "Ethik",
                        "Erkenntnistheorie",
                        "Mäeutik",
                        "Logik",
                        "Wissenschaftstheorie",
                        "Bioethik",
                        "Der Wiener Kreis",
                        "Glaube und Wissen",
                        "Die 3 Kritiken",
                    ]
                ),
                Integer([4, 4, 3, 2, 4, 3, 2, 2, 2, 4]),
                Integer([2137, 2125, 2126, 2125, 2125, 2126, 2126, 2133, 2134, 2137]),
            ],
        ),
        TableSpec(
            out_dir / "vorraussetzen.parquet",
            """
            message schema {
                required int32 Vorgaenger;
                required int32 Nachfolger;
            }
            """,
            [
                Integer([5001, 5001, 5001, 5041, 5043, 5041, 5052]),
                Integer([5041, 5043, 5049, 5216, 5052, 5052, 5259]),
            ],
        ),
        TableSpec(
            out_dir / "hoeren.parquet",
            """
            message schema {
                required int32 MatrNr;
                required int32 VorlNr;
            }
            """,
            [
                Integer(
                    [26120, 27550, 27550, 28106, 28106, 28106, 28106, 29120, 29120, 29120,
                     29555, 25403]
                ),
                Integer([5001, 5001, 4052, 5041, 5052, 5216, 5259, 5001, 5041, 5049, 5022, 5022]),
            ],
        ),
        TableSpec(
            out_dir / "pruefen.parquet",
            """
            message schema {
                required int32 MatrNr;
                required int32 VorlNr;
                required int32 PersNr;
                required int32 Note;
            }
            """,
            [
                Integer([28106, 25403, 27550]),
                Integer([5001, 5041, 4630]),
                Integer([2126, 2125, 2137]),
                Integer([1, 2, 2]),
            ],
        ),
        TableSpec(
            out_dir / "assistenten.parquet",
            """
            message schema {
                required int32 PersNr;
                required byte_array Name (UTF8);
                required byte_array Fachgebiet (UTF8);
                required int32 Boss;
            }
            """,
            [
                Integer([3002, 3003, 3004, 3005, 3006, 3007]),
                Varchar(
                    ["Platon", "Aristoteles", "Wittgenstein", "Rhetikus", "Newton", "Spinoza"]
                ),
                Varchar(
                    [
                        "Ideenlehre",
                        "Syllogistik",
                        "Sprachteorie",
                        "Planetenbewegung",
                        "Keplersche Gesetze",
                        "Gott und Natur",
                    ]
                ),
                Integer([2125, 2125, 2126, 2127, 2127, 2126]),
            ],
        ),
    ]
