from __future__ import annotations

import logging
import sys
from importlib.resources import files
from pathlib import Path

_TEMPLATES = [
    ("company.yaml.example", "company.yaml"),
    ("products.yaml.example", "products.yaml.example"),
    ("env.example", ".env.example"),
]


def _init_config() -> None:
    """Copy bundled config templates to the user's config/data directories."""
    from freshbill.config import get_config_dir, get_data_dir

    config_dir = get_config_dir()
    data_dir = get_data_dir()
    templates = files("freshbill") / "templates"

    config_dir.mkdir(parents=True, exist_ok=True)
    data_dir.mkdir(parents=True, exist_ok=True)

    copied = 0
    for src_name, dest_name in _TEMPLATES:
        dest = config_dir / dest_name
        if dest.exists():
            print(f"  already exists: {dest}")
            continue
        src = templates / src_name
        with src.open("rb") as f:
            dest.write_bytes(f.read())
        print(f"  created: {dest}")
        copied += 1

    print()
    print(f"Config: {config_dir}")
    print(f"Data:   {data_dir}")
    print()
    if copied:
        print("Next steps:")
        print(f"  1. Edit {config_dir / 'company.yaml'} with your shop details")
        print("  2. Optionally set FRESHBILL_FEED_URL in .env to load prices from a sheet")
        print("  3. Run: freshbill")
    else:
        print("No new files created (all already existed).")


def _setup_logging(data_dir: Path) -> None:
    """Send log records to a file; stderr would draw over the TUI."""
    logging.basicConfig(
        filename=data_dir / "freshbill.log",
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _preflight() -> bool:
    """Make sure the data directory is writable before launching the TUI."""
    from freshbill.config import get_data_dir

    data_dir = get_data_dir()
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error: cannot create data directory {data_dir}: {e}")
        return False
    _setup_logging(data_dir)
    return True


def _export(args: list[str]) -> int:
    """Write the saved invoice to a PDF without opening the TUI."""
    from freshbill.config import get_data_dir, get_export_dir, load_company
    from freshbill.models.company import CompanyProfile
    from freshbill.services.invoice_session import InvoiceSession
    from freshbill.services.pdf_export import export_invoice_pdf
    from freshbill.services.storage import JsonFileStore

    directory = Path(args[0]).expanduser() if args else get_export_dir()
    session = InvoiceSession.open(
        JsonFileStore(get_data_dir()), CompanyProfile.from_dict(load_company())
    )
    if not session.document.items:
        print("Error: the saved invoice has no items.")
        return 1
    path, replaced = export_invoice_pdf(session.document, session.totals, directory)
    print(f"PDF saved to: {path}" + (" (replaced existing file)" if replaced else ""))
    return 0


def main() -> None:
    """Entry point for the freshbill CLI/TUI."""
    if len(sys.argv) > 1 and sys.argv[1] == "init":
        _init_config()
        return

    if not _preflight():
        sys.exit(1)

    if len(sys.argv) > 1 and sys.argv[1] == "export":
        sys.exit(_export(sys.argv[2:]))

    from freshbill.tui.app import FreshbillApp

    app = FreshbillApp()
    app.run()


if __name__ == "__main__":
    main()
