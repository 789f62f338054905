#!/usr/bin/env python3
"""Write demonstration workbooks for sheetshape.

Produces, in the target directory:
- Ventes_2024.xlsx, Inventaire.xlsx, Employes.xlsx: plain header + rows tables
- Transpose.xlsx: attributes laid out as rows (Name / Age / City)
- Reporting.xlsx: store report with a merged title and CA REALISE / OBJECTIF blocks

Usage:
    python scripts/make_sample_workbooks.py --out ./data
"""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font

TABLES: dict[str, tuple[str, list[list[Any]]]] = {
    "Ventes_2024.xlsx": (
        "Ventes",
        [
            ["Date", "Produit", "Quantité", "Prix Unitaire", "Total"],
            [date(2024, 1, 15), "Ordinateur", 5, 899.99, 4499.95],
            [date(2024, 1, 20), "Souris", 25, 29.99, 749.75],
            [date(2024, 2, 10), "Clavier", 15, 79.99, 1199.85],
            [date(2024, 2, 25), "Écran", 8, 299.99, 2399.92],
            [date(2024, 3, 5), "Webcam", 12, 89.99, 1079.88],
        ],
    ),
    "Inventaire.xlsx": (
        "Inventaire",
        [
            ["Référence", "Nom", "Catégorie", "Stock", "Prix"],
            ["REF001", "Ordinateur Portable", "Informatique", 45, 899.99],
            ["REF002", "Souris Sans Fil", "Accessoires", 150, 29.99],
            ["REF003", "Clavier Mécanique", "Accessoires", 78, 79.99],
            ["REF004", "Écran 27 pouces", "Informatique", 32, 299.99],
        ],
    ),
    "Employes.xlsx": (
        "Employés",
        [
            ["ID", "Nom", "Prénom", "Département", "Salaire", "Date Embauche"],
            [1, "Dupont", "Jean", "Ventes", 3500, date(2020, 3, 15)],
            [2, "Martin", "Sophie", "Marketing", 3800, date(2019, 6, 20)],
            [3, "Bernard", "Luc", "IT", 4200, date(2018, 9, 10)],
            [4, "Dubois", "Marie", "RH", 3600, date(2021, 1, 5)],
        ],
    ),
}

TRANSPOSED = [
    ["Name", "Alice", "Bob", "Charlie"],
    ["Age", 25, 30, 35],
    ["City", "Paris", "London", "NY"],
]

REPORT = [
    ["SUIVI OBJECTIF RÉALISATION CA PAR ATELIER", 725000],
    [],
    ["GRIM PASSION LATTES"],
    ["CA REALISE", 4224, 8739, 12094, 16018, 22422],
    ["OBJECTIF", 5056, 11712, 17560, 23424, 29280],
    ["% DE REALISATION", 0.72, 0.75, 0.69, 0.68, 0.77],
    [],
    ["ATELIER DES GOURMETS"],
    ["CA REALISE", 6100, 12040, 18300],
    ["OBJECTIF", 5000, 10000, 15000],
]


def write_table(path: Path, sheet_name: str, rows: list[list[Any]]) -> None:
    frame = pd.DataFrame(rows[1:], columns=rows[0])
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)


def write_rows(path: Path, sheet_name: str, rows: list[list[Any]], *, title_merge: str | None = None) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for row in rows:
        ws.append(row)
    if title_merge:
        ws.merge_cells(title_merge)
        ws["A1"].font = Font(bold=True, size=14)
    wb.save(path)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Write demonstration workbooks")
    p.add_argument("--out", type=Path, default=Path("data"), help="Output directory")
    args = p.parse_args(argv)

    args.out.mkdir(parents=True, exist_ok=True)
    for name, (sheet_name, rows) in TABLES.items():
        write_table(args.out / name, sheet_name, rows)
    write_rows(args.out / "Transpose.xlsx", "TransposedData", TRANSPOSED)
    write_rows(args.out / "Reporting.xlsx", "ReportData", REPORT, title_merge="A1:D1")

    for f in sorted(args.out.glob("*.xlsx")):
        print(f"wrote {f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
