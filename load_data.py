# load_data.py
"""
Load the seed CSVs into a fresh in-memory store and print the dashboard:
headline stats, invoice aging and the RM collection ranking.
"""

from app.db.store import InvoiceStore
from app.services.reports import aging_buckets, collection_efficiency, rm_performance
from scripts.ingest import load_into_store, parse_seed_csv


def main():
    rms_list, invoices_list, stats = parse_seed_csv()
    store = load_into_store(InvoiceStore(), rms_list, invoices_list)

    invoices = store.list_invoices()
    dashboard = store.get_dashboard_stats()

    print("Load complete.")
    print(f"Rows with errors:      {stats['n_errors']}")
    print(f"Invoices:              {dashboard.total_invoices}")
    print(f"Total amount:          {dashboard.total_amount}")
    print(f"Paid amount:           {dashboard.paid_amount}")
    print(f"Pending amount:        {dashboard.pending_amount}")
    print(f"Overdue invoices:      {dashboard.overdue_invoices}")
    print(f"Assigned today:        {dashboard.assigned_today}")
    print(f"Collection efficiency: {collection_efficiency(invoices)}%")

    aging = aging_buckets(invoices, store.today())
    print("\nAging:")
    for label, count in aging.model_dump(by_alias=True).items():
        print(f"  {label:<8} {count}")

    print("\nRM performance:")
    for row in rm_performance(store.list_rms(), invoices):
        print(
            f"  {row.name:<20} {row.paid_invoices}/{row.total_invoices} paid "
            f"({row.collection_rate:.0f}%), collected {row.collected_amount}"
        )


if __name__ == "__main__":
    main()
