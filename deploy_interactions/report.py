from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import DeployResponse, SingleDeployResponse


__all__ = (
    'render_report',
    'render_table',
)


MAX_CELL_WIDTH = 30


def _wrap(cell: str) -> list[str]:
    lines: list[str] = []

    for word in cell.split(' '):
        if lines and len(lines[-1]) + len(word) + 1 <= MAX_CELL_WIDTH:
            lines[-1] = f'{lines[-1]} {word}'
            continue

        while len(word) > MAX_CELL_WIDTH:
            lines.append(word[:MAX_CELL_WIDTH])
            word = word[MAX_CELL_WIDTH:]

        lines.append(word)

    return lines or ['']


def render_table(
    rows: Sequence[Sequence[str]],
    header: str | None = None
) -> str:
    """Boxed plain text table, the first row is the column headings"""
    wrapped = [[_wrap(cell) for cell in row] for row in rows]
    widths = [
        max(len(line) for row in wrapped for line in row[column])
        for column in range(len(rows[0]))
    ]

    inner = sum(widths) + 3 * (len(widths) - 1)

    if header is not None and len(header) > inner:
        widths[-1] += len(header) - inner
        inner = len(header)

    border = '+' + '+'.join('-' * (width + 2) for width in widths) + '+'
    output = [border]

    if header is not None:
        output.extend([f'| {header:<{inner}} |', border])

    for row in wrapped:
        for index in range(max(len(cell) for cell in row)):
            output.append('| ' + ' | '.join(
                (cell[index] if index < len(cell) else '').ljust(width)
                for cell, width in zip(row, widths, strict=True)
            ) + ' |')

        output.append(border)

    return '\n'.join(output)


def _render_destination(
    destination: str,
    result: SingleDeployResponse,
    dry_run: bool
) -> str:
    if result.bulk_error is not None:
        return f'Deploy to {destination} failed: {result.bulk_error.message}'

    header = (
        f'Deploy to {destination} partially successful'
        if result.errored else
        f'Deploy to {destination} successful'
    )

    if dry_run:
        return render_table([
            ['Type', 'Name', 'Status'],
            *(
                [str(skipped.command.effective_type), skipped.name, 'Skipped (Dry Run)']
                for skipped in result.skipped
            )
        ], header)

    rows = [['Type', 'Name', 'ID', 'Version', 'Status']]

    rows.extend(
        [str(command.type), command.name, command.id, command.version, 'Success']
        for command in result.commands
    )

    rows.extend(
        [
            str(skipped.command.effective_type),
            skipped.name,
            skipped.id or 'N/A',
            skipped.existing.version if skipped.existing is not None else 'N/A',
            'Skipped (Matched Existing)'
        ]
        for skipped in result.skipped
    )

    rows.extend(
        [
            str(errored.command.effective_type),
            errored.name,
            'N/A',
            'N/A',
            f'Failed ({errored.error.message})'
        ]
        for errored in result.errored
    )

    return render_table(rows, header)


def _render_status(report: DeployResponse) -> str:
    results = [result for _, result in report.results]

    failed = not any(result.commands or result.skipped for result in results)
    successful = all(result.ok for result in results)

    if failed:
        return 'Deploy Completed: Failed'

    if successful:
        return 'Deploy Completed: Successful'

    return 'Deploy Completed: Partially Successful'


def _errored_cell(result: SingleDeployResponse) -> str:
    if result.bulk_error is not None:
        return f'All ({result.bulk_error.message})'

    return str(len(result.errored))


def render_report(
    report: DeployResponse | None,
    dry_run: bool = False,
    full: bool = False,
    summary: bool = True,
    debug: bool = False
) -> str:
    """Render a deploy's outcome for the terminal.

    Dev mode, dry runs and debug output always render every destination in
    full; otherwise a summary table is rendered, or a single status line when
    the summary is disabled.
    """
    if report is None:
        return 'No commands found to deploy!'

    if report.error is not None:
        return f'Deployment Failed: {report.error if debug else report.error.message}'

    if report.global_result is None and not report.guilds:
        return 'No Commands Deployed'

    if report.dev is not None:
        return _render_destination(report.dev, report.guilds[report.dev], dry_run)

    if debug or dry_run or full:
        return '\n'.join(
            _render_destination(destination, result, dry_run)
            for destination, result in report.results
        )

    if not summary:
        return _render_status(report)

    rows = [['Destination', 'Successful', 'Skipped', 'Errored']]

    rows.extend(
        [
            'Global' if destination == 'global' else f'Guild ({destination})',
            str(len(result.commands)),
            str(len(result.skipped)),
            _errored_cell(result)
        ]
        for destination, result in report.results
    )

    return render_table(rows, 'Summary')
