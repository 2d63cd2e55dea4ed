# parse_data.py
"""
Parse the seed CSVs (data/rms.csv, data/invoices.csv) and print basic stats.
"""

from scripts.ingest import parse_seed_csv


def main():
    rms_list, invoices_list, stats = parse_seed_csv()

    print(f"RM rows read:          {stats['n_rm_rows']}")
    print(f"Invoice rows read:     {stats['n_invoice_rows']}")
    print(f"RMs parsed:            {stats['n_rms']}")
    print(f"Invoices parsed:       {stats['n_invoices']}")
    print(f"Rows with errors:      {stats['n_errors']}")
    print(f"Duplicate RM emails:   {stats['n_duplicate_rms']}")

    if stats["error_examples"]:
        print("\nExample errors:")
        for ex in stats["error_examples"]:
            print(f"- {ex['file']} row {ex['row_number']}: {ex['error']}")


if __name__ == "__main__":
    main()
