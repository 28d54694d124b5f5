# utils/sales_tracker/export.py
"""
Exports for Sales Tracker

- CSV: rep summary (lifetime totals) + detailed deal history
- JSON: backup of the full persisted list with lifetime totals
- Excel: formatted workbook (Summary + Deal History sheets) via openpyxl

All exports refuse an empty representative list.
"""

import json
import logging
from datetime import datetime, tzinfo
from io import BytesIO, StringIO
from typing import List

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from .constants import (
    CSV_SUMMARY_HEADER,
    CSV_DETAIL_TITLE,
    CSV_DETAIL_HEADER,
    EXCEL_STYLES,
    MSG_NO_DATA,
)
from .filters import get_local_timezone, local_now
from .metrics import SalesMetrics
from .models import Representative, format_timestamp

logger = logging.getLogger(__name__)

# Amounts with two decimals, fields quoted only when needed
CSV_OPTIONS = {'float_format': '%.2f', 'lineterminator': '\n'}


class ExportError(ValueError):
    """Export refused; message is shown to the user."""


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def format_short_date(moment: datetime, tz: tzinfo) -> str:
    """Local calendar date, e.g. 6/10/2025."""
    local = moment.astimezone(tz)
    return f"{local.month}/{local.day}/{local.year}"


def format_date_time(moment: datetime, tz: tzinfo) -> str:
    """Local date and time, e.g. 6/10/2025, 8:15:00 AM."""
    local = moment.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = 'AM' if local.hour < 12 else 'PM'
    return f"{format_short_date(local, tz)}, {hour}:{local.minute:02d}:{local.second:02d} {suffix}"


class SalesExport:
    """
    Export generator for the sales board.

    Usage:
        exporter = SalesExport()
        csv_text = exporter.to_csv(store.reps)

        st.download_button(
            label="Export CSV",
            data=csv_text,
            file_name="sales-data.csv",
            mime="text/csv"
        )
    """

    def __init__(self, tz: tzinfo = None, clock=None):
        self.tz = tz if tz is not None else get_local_timezone()
        self.clock = clock if clock is not None else local_now
        self.wb = None
        self._init_styles()

    def _init_styles(self):
        """Initialize reusable styles."""
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.header_font = Font(
            bold=True,
            color=EXCEL_STYLES['header_font_color'],
            size=11
        )
        self.title_font = Font(bold=True, size=16)

        thin_border = Side(style='thin', color='000000')
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border
        )

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.right_align = Alignment(horizontal='right', vertical='center')

        self.currency_format = EXCEL_STYLES['currency_format']
        self.date_format = EXCEL_STYLES['date_format']

    @staticmethod
    def _require_data(reps: List[Representative]):
        if not reps:
            logger.warning("Export refused: no sales reps")
            raise ExportError(MSG_NO_DATA)

    # =========================================================================
    # CSV
    # =========================================================================

    def to_csv(self, reps: List[Representative]) -> str:
        """
        Build the CSV export: rep summary, two blank lines, then the deal history.

        Raises:
            ExportError: if reps is empty
        """
        self._require_data(reps)

        summary_df = pd.DataFrame(
            [
                {
                    'name': rep.name,
                    'deals': rep.deals,
                    'revenue': float(rep.revenue),
                    'avg_deal': float(rep.average_deal_size),
                    'last_deal': format_short_date(rep.last_deal.date, self.tz) if rep.last_deal else 'N/A',
                }
                for rep in reps
            ],
            columns=['name', 'deals', 'revenue', 'avg_deal', 'last_deal']
        )
        history_df = pd.DataFrame(
            [
                {
                    'name': rep.name,
                    'date': format_date_time(deal.date, self.tz),
                    'amount': float(deal.amount),
                }
                for rep in reps
                for deal in rep.deal_history
            ],
            columns=['name', 'date', 'amount']
        )

        output = StringIO()
        summary_df.to_csv(output, index=False, header=CSV_SUMMARY_HEADER, **CSV_OPTIONS)
        output.write(f"\n\n{CSV_DETAIL_TITLE}\n")
        history_df.to_csv(output, index=False, header=CSV_DETAIL_HEADER, **CSV_OPTIONS)

        logger.info(f"📥 Exported {len(reps)} reps to CSV")
        return output.getvalue()

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(self, reps: List[Representative]) -> str:
        """
        Build the JSON backup.

        Raises:
            ExportError: if reps is empty
        """
        self._require_data(reps)

        totals = SalesMetrics(reps).lifetime_totals()
        data = {
            'exportDate': format_timestamp(self.clock()),
            'totalReps': totals['total_reps'],
            'totalDeals': totals['total_deals'],
            'totalRevenue': totals['total_revenue'],
            'salesReps': [rep.to_dict() for rep in reps],
        }

        logger.info(f"📥 Exported {len(reps)} reps to JSON")
        return json.dumps(data, indent=2)

    # =========================================================================
    # EXCEL
    # =========================================================================

    def create_excel_report(self, reps: List[Representative]) -> BytesIO:
        """
        Create formatted Excel report with Summary and Deal History sheets.

        Raises:
            ExportError: if reps is empty

        Returns:
            BytesIO containing Excel file
        """
        self._require_data(reps)

        self.wb = Workbook()
        self._create_summary_sheet(self._summary_frame(reps))
        self._create_history_sheet(self._history_frame(reps))

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info("Excel report created successfully")
        return output

    def _local_naive(self, moment: datetime) -> datetime:
        # openpyxl rejects timezone-aware datetimes
        return moment.astimezone(self.tz).replace(tzinfo=None)

    def _summary_frame(self, reps: List[Representative]) -> pd.DataFrame:
        rows = [
            {
                'name': rep.name,
                'deals': rep.deals,
                'revenue': rep.revenue,
                'avg_deal': rep.average_deal_size,
                'last_deal': self._local_naive(rep.last_deal.date) if rep.last_deal else None,
            }
            for rep in reps
        ]
        return pd.DataFrame(rows, columns=['name', 'deals', 'revenue', 'avg_deal', 'last_deal'])

    def _history_frame(self, reps: List[Representative]) -> pd.DataFrame:
        rows = [
            {
                'name': rep.name,
                'date': self._local_naive(deal.date),
                'amount': deal.amount,
            }
            for rep in reps
            for deal in rep.deal_history
        ]
        return pd.DataFrame(rows, columns=['name', 'date', 'amount'])

    def _write_table(self, ws, df: pd.DataFrame, columns: List[tuple], start_row: int):
        """Write styled headers + rows; columns are (field, header, width, kind)."""
        for col_idx, (_, header, width, _) in enumerate(columns, 1):
            cell = ws.cell(row=start_row, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            cell.border = self.cell_border
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        for row_idx, record in enumerate(df.to_dict('records'), start_row + 1):
            for col_idx, (field, _, _, kind) in enumerate(columns, 1):
                value = record[field]
                if pd.isna(value):
                    value = 'N/A'
                elif isinstance(value, pd.Timestamp):
                    value = value.to_pydatetime()

                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border

                if kind == 'currency':
                    cell.number_format = self.currency_format
                    cell.alignment = self.right_align
                elif kind == 'date' and value != 'N/A':
                    cell.number_format = self.date_format
                elif kind == 'count':
                    cell.alignment = self.center_align

    def _create_summary_sheet(self, df: pd.DataFrame):
        ws = self.wb.active
        ws.title = "Summary"

        ws.cell(row=1, column=1, value="Sales Rep Report")
        ws.cell(row=1, column=1).font = self.title_font
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=5)
        ws.cell(row=2, column=1, value=f"Generated: {self.clock().strftime('%Y-%m-%d %H:%M')}")

        self._write_table(ws, df, [
            ('name', 'Sales Rep', 25, 'text'),
            ('deals', 'Total Deals', 12, 'count'),
            ('revenue', 'Total Revenue', 16, 'currency'),
            ('avg_deal', 'Average Deal Size', 18, 'currency'),
            ('last_deal', 'Last Deal Date', 18, 'date'),
        ], start_row=4)

    def _create_history_sheet(self, df: pd.DataFrame):
        ws = self.wb.create_sheet("Deal History")

        self._write_table(ws, df, [
            ('name', 'Sales Rep', 25, 'text'),
            ('date', 'Date', 20, 'date'),
            ('amount', 'Amount', 15, 'currency'),
        ], start_row=1)

        ws.freeze_panes = 'A2'
