# main.py

"""Streamlit web UI for the document redaction system.

Loads a document into an in-memory host, redacts emails, phone numbers and
SSNs with tracked changes, and shows the counts and the revision trail.
"""

import streamlit as st
import logging

from doc_redaction.logging_config import configure_logging
from doc_redaction.service.config import settings
from doc_redaction.service.pipeline import run_redaction

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


def render_result(report) -> None:
    """Shows counts, flags, redacted text and tracked revisions."""
    result = report.result

    st.success(f"Redaction complete. {result.total} items redacted.")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Emails", result.email_count)
    c2.metric("Phones", result.phone_count)
    c3.metric("SSNs", result.ssn_count)
    c4.metric("Total", result.total)

    if result.tracking_enabled:
        st.markdown("✓ Track Changes enabled")
    if result.header_added:
        st.markdown("✓ Header added")

    st.text_area("Redacted Document", value=report.text, height=300)

    revisions = report.document.revisions
    if revisions:
        with st.expander(f"Tracked changes ({len(revisions)})"):
            st.table(
                [
                    {"Change": r.kind, "Location": r.location, "Text": r.text}
                    for r in revisions
                ]
            )


def main():
    """Run the Streamlit application UI."""
    st.set_page_config(layout="wide", page_title="Document Redactor", page_icon="🛡️")

    st.title("Document Redactor")
    st.markdown("Automatically redact sensitive information")
    st.markdown("---")

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Document")
        text_input = st.text_area(
            "Source Document",
            height=400,
            placeholder="Paste document text here...",
        )
        supports_headers = st.checkbox("Host supports page headers", value=True)

    with col2:
        st.subheader("Result")

        if st.button("Redact Document", type="primary"):
            if not text_input or not text_input.strip():
                st.warning("Please enter text to process.")
                logger.warning("Redaction attempted with empty input")

            else:
                with st.spinner("Processing..."):
                    report = run_redaction(
                        text_input, supports_headers=supports_headers
                    )

                if report.ok:
                    render_result(report)
                else:
                    st.error(f"Error: {report.error}")

    with st.sidebar:
        st.header("About")
        st.markdown("""
        Replaces sensitive information with redaction markers:

        - **Email addresses** → `[EMAIL REDACTED]`
        - **Phone numbers** → `[PHONE REDACTED]`
        - **Social security numbers** → `[SSN REDACTED]`

        Every replacement is recorded as a tracked change and the document
        is marked **CONFIDENTIAL DOCUMENT**.
        """)


if __name__ == "__main__":
    main()
