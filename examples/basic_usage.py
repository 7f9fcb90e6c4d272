#!/usr/bin/env python3
"""
Nutrient DWS client usage examples.

Set NUTRIENT_API_KEY before running. Input files are read from the
current directory.
"""

import os
from pathlib import Path

from nutrient_dws import (
    APIError,
    AuthenticationError,
    NutrientClient,
    ValidationError,
    setup_logging,
)


def convert_and_watermark(client: NutrientClient):
    """Convert a DOCX to PDF, then watermark it."""
    print("=== Convert and Watermark ===")

    pdf = client.convert("sample.docx", to="pdf")
    Path("sample.pdf").write_bytes(pdf)
    print(f"✓ Converted sample.docx ({len(pdf)} bytes)")

    watermarked = client.watermark(
        pdf, text="CONFIDENTIAL", font_size=72, opacity=0.4, rotation=45
    )
    Path("sample_watermarked.pdf").write_bytes(watermarked)
    print("✓ Added text watermark")


def page_operations(client: NutrientClient):
    """Rearrange pages without leaving the service."""
    print("\n=== Page Operations ===")

    first_pages = client.split("sample.pdf", ranges="1-2")
    without_cover = client.delete_pages("sample.pdf", page=0)
    padded = client.add_page(without_cover, position="beginning", page_size="A4")
    labelled = client.set_page_label(
        padded,
        labels=[
            {"page": 0, "label": "Cover"},
            {"start_page": 1, "end_page": 2, "label": "Intro"},
        ],
    )
    merged = client.merge([first_pages, labelled])
    Path("sample_reworked.pdf").write_bytes(merged)
    print(f"✓ Reworked document ({len(merged)} bytes)")


def remote_documents(client: NutrientClient):
    """URL inputs are fetched by the service instead of uploaded."""
    print("\n=== Remote Documents ===")

    searchable = client.ocr("https://www.nutrient.io/downloads/sample.pdf", language="eng")
    print(f"✓ OCR on remote document ({len(searchable)} bytes)")


def error_handling(client: NutrientClient):
    """Demonstrate the error types."""
    print("\n=== Error Handling ===")

    try:
        client.rotate("sample.pdf", rotate_by=45)
    except ValidationError as e:
        print(f"✓ Rejected before sending: {e}")

    try:
        client.redact("sample.pdf", text=["ACME Corp", "555-0100"])
        print("✓ Redacted terms")
    except APIError as e:
        print(f"❌ API error {e.status_code}: {e}")
        print(f"   Raw body: {e.response_body}")


def main():
    setup_logging(os.getenv("NUTRIENT_LOG_LEVEL", "INFO"))

    try:
        with NutrientClient.from_env(max_retries=2) as client:
            convert_and_watermark(client)
            page_operations(client)
            remote_documents(client)
            error_handling(client)
    except AuthenticationError:
        print("❌ Check NUTRIENT_API_KEY")


if __name__ == "__main__":
    main()
