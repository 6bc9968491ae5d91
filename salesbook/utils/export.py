"""
Export utilities for generating Excel and CSV exports of collection reports
"""

import csv
import io
from io import BytesIO
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from salesbook.utils.helpers import format_currency, format_date, to_decimal

EXCEL_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
CSV_MIMETYPE = 'text/csv'
EXPORT_FORMATS = ('csv', 'excel')


def _headers_and_keys(columns):
    if isinstance(columns, dict):
        return list(columns.values()), list(columns.keys())
    return list(columns), list(columns)


def export_to_excel(data, columns, title="Report", info_lines=(), sheet_name="Data", generated_at=None):
    """
    Export data to Excel format

    Args:
        data: List of dictionaries containing the data
        columns: Dict mapping keys to display names (or list of keys)
        title: Report title for the header
        info_lines: Extra lines printed under the title (period, totals...)
        sheet_name: Name of the worksheet
        generated_at: Timestamp printed in the header (defaults to now)

    Returns:
        BytesIO object containing the Excel file
    """
    headers, keys = _headers_and_keys(columns)
    generated_at = generated_at or datetime.now()

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    # Styles
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="3B82F6", end_color="3B82F6", fill_type="solid")
    title_font = Font(bold=True, size=14)
    info_font = Font(italic=True, size=10, color="666666")
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    # Title
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = title_font
    title_cell.alignment = Alignment(horizontal='center')

    # Generated timestamp and info lines
    lines = [f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}"] + list(info_lines)
    for offset, line in enumerate(lines, 2):
        ws.merge_cells(start_row=offset, start_column=1, end_row=offset, end_column=len(headers))
        cell = ws.cell(row=offset, column=1, value=line)
        cell.font = info_font
        cell.alignment = Alignment(horizontal='left')

    # Headers
    header_row = len(lines) + 3
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=header_row, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center')
        cell.border = thin_border

    # Data rows
    for row_idx, row_data in enumerate(data, header_row + 1):
        for col_idx, key in enumerate(keys, 1):
            value = row_data.get(key, '')
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = thin_border

            # Format numbers
            if isinstance(value, (int, float)) or hasattr(value, 'quantize'):
                cell.number_format = '#,##0.00'
                cell.alignment = Alignment(horizontal='right')
            else:
                cell.alignment = Alignment(horizontal='left')

    # Adjust column widths
    for col_idx in range(1, len(headers) + 1):
        column_letter = get_column_letter(col_idx)
        max_length = max(
            (len(str(cell.value)) for cell in ws[column_letter][header_row - 1:] if cell.value is not None),
            default=0
        )
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    # Save to BytesIO
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_to_csv(data, columns, title=None, info_lines=(), include_header=True, generated_at=None):
    """
    Export data to CSV format

    When a title is given the file opens with a short preamble: title,
    generation time, info lines and a blank row, followed by the table.

    Args:
        data: List of dictionaries containing the data
        columns: Dict mapping keys to display names (or list of keys)
        title: Optional report title
        info_lines: Extra preamble lines
        include_header: Whether to include header row
        generated_at: Timestamp printed in the preamble (defaults to now)

    Returns:
        BytesIO object containing the CSV file
    """
    headers, keys = _headers_and_keys(columns)

    text_output = io.StringIO()
    writer = csv.writer(text_output)

    if title:
        generated_at = generated_at or datetime.now()
        writer.writerow([title])
        writer.writerow([f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}"])
        for line in info_lines:
            writer.writerow([line])
        writer.writerow([])

    if include_header:
        writer.writerow(headers)

    for row_data in data:
        writer.writerow([row_data.get(key, '') for key in keys])

    output = BytesIO()
    output.write(text_output.getvalue().encode('utf-8-sig'))  # BOM for Excel compatibility
    output.seek(0)
    return output


def _export(data, columns, title, info_lines, format_type, generated_at):
    if format_type == 'excel':
        return export_to_excel(data, columns, title=title, info_lines=info_lines, generated_at=generated_at)
    return export_to_csv(data, columns, title=title, info_lines=info_lines, generated_at=generated_at)


def export_daily_report(as_of_date, totals, salesperson_totals, summary=None,
                        format_type='csv', currency_symbol='₹', generated_at=None):
    """
    Export the per-salesperson breakdown for one date

    Args:
        as_of_date: Report date
        totals: Result of aggregation_service.daily_totals
        salesperson_totals: Result of aggregation_service.per_salesperson_totals
        summary: Optional DailySummary reconciliation record
        format_type: 'csv' or 'excel'

    Returns:
        BytesIO object with the file
    """
    columns = {
        'salesperson': 'Salesperson',
        'cash': 'Cash Collected',
        'digital': 'Digital Collected',
        'expenses': 'Expenses',
        'net': 'Net Total',
        'entry_count': 'Entries',
    }

    data = [{
        'salesperson': row['salesperson'].name,
        'cash': to_decimal(row['cash']),
        'digital': to_decimal(row['digital']),
        'expenses': to_decimal(row['expenses']),
        'net': to_decimal(row['net']),
        'entry_count': row['entry_count'],
    } for row in salesperson_totals]

    info_lines = [
        f"Date: {format_date(as_of_date)}",
        f"Total Cash: {format_currency(totals['cash'], currency_symbol)}",
        f"Total Digital: {format_currency(totals['digital'], currency_symbol)}",
        f"Total Expenses: {format_currency(totals['expenses'], currency_symbol)}",
        f"Net Total: {format_currency(totals['net'], currency_symbol)}",
    ]
    if summary is not None:
        info_lines += [
            f"Opening Cash: {format_currency(summary.opening_cash, currency_symbol)}",
            f"Closing Balance: {format_currency(summary.closing_balance, currency_symbol)}",
        ]

    return _export(data, columns, "Daily Sales Report", info_lines, format_type, generated_at)


def export_sales_records(entries, period_totals, salesperson_name=None,
                         format_type='csv', currency_symbol='₹', generated_at=None):
    """
    Export the historical entries of a period with a summary preamble

    Args:
        entries: SalesEntry rows from ledger_service.list_sales_entries_in_range
        period_totals: Result of aggregation_service.range_totals
        salesperson_name: Name of the filtered salesperson, if any
        format_type: 'csv' or 'excel'

    Returns:
        BytesIO object with the file
    """
    columns = {
        'date': 'Date',
        'salesperson': 'Salesperson',
        'cash': 'Cash Collected',
        'digital': 'Digital Collected',
        'expenses': 'Expenses',
        'net': 'Net Amount',
        'notes': 'Notes',
        'created_at': 'Entry Time',
    }

    data = [{
        'date': format_date(entry.date),
        'salesperson': entry.salesperson.name if entry.salesperson else '',
        'cash': to_decimal(entry.cash_collected),
        'digital': to_decimal(entry.digital_collected),
        'expenses': to_decimal(entry.expenses),
        'net': to_decimal(entry.net_amount),
        'notes': entry.notes or 'No notes',
        'created_at': format_date(entry.created_at, '%Y-%m-%d %H:%M:%S'),
    } for entry in entries]

    info_lines = [
        f"Period: {format_date(period_totals['from_date'])} to {format_date(period_totals['to_date'])}",
        f"Salesperson: {salesperson_name}" if salesperson_name else 'All Salespersons',
        f"Total Records: {len(data)}",
        f"Total Cash: {format_currency(period_totals['cash'], currency_symbol)}",
        f"Total Digital: {format_currency(period_totals['digital'], currency_symbol)}",
        f"Total Expenses: {format_currency(period_totals['expenses'], currency_symbol)}",
        f"Net Total: {format_currency(period_totals['net'], currency_symbol)}",
    ]

    return _export(data, columns, "Sales Records Export", info_lines, format_type, generated_at)
