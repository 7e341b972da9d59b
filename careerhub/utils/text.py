"""Text extraction helpers used to turn résumés into prompt input."""

from __future__ import annotations

import ipaddress
import socket
from io import BytesIO
from typing import Any, List, Mapping
from urllib.parse import urljoin, urlparse

import requests
from flask import current_app
from pypdf import PdfReader

from careerhub.errors import UpstreamError, ValidationError

MAX_STORED_TEXT_LENGTH = 20_000
MAX_RESUME_DOWNLOAD_BYTES = 5 * 1024 * 1024
MAX_RESUME_REDIRECTS = 3


def extract_pdf_text(raw_bytes: bytes) -> str:
    """Extract text from a PDF file while guarding against parser errors."""
    try:
        pages = list(PdfReader(BytesIO(raw_bytes)).pages)
    except Exception:
        current_app.logger.warning("Unable to initialize PdfReader for resume file", exc_info=True)
        return ""

    collected: List[str] = []
    for page in pages:
        try:
            page_text = page.extract_text() or ""
        except Exception:
            current_app.logger.warning("Failed to extract text from a PDF page", exc_info=True)
            page_text = ""

        if page_text:
            collected.append(page_text)

    combined = "\n".join(collected).strip()
    return combined[:MAX_STORED_TEXT_LENGTH]


def resume_content_to_text(content: Mapping[str, Any]) -> str:
    """Flatten structured résumé content into plain text for prompts."""
    if not content:
        return ""

    lines: List[str] = []
    info = content.get("personalInfo") or {}
    header = [info.get("fullName"), info.get("email"), info.get("phone"), info.get("location")]
    lines.append(" | ".join(part for part in header if part))

    if content.get("summary"):
        lines += ["", "Summary", content["summary"]]

    experience = content.get("experience") or []
    if experience:
        lines += ["", "Experience"]
        for entry in experience:
            lines.append(f"{entry.get('title', '')} at {entry.get('company', '')} ({entry.get('duration', '')})")
            if entry.get("description"):
                lines.append(entry["description"])

    education = content.get("education") or []
    if education:
        lines += ["", "Education"]
        for entry in education:
            lines.append(f"{entry.get('degree', '')}, {entry.get('school', '')} ({entry.get('year', '')})")

    skills = content.get("skills") or []
    if skills:
        lines += ["", "Skills", ", ".join(skills)]

    projects = content.get("projects") or []
    if projects:
        lines += ["", "Projects"]
        for project in projects:
            lines.append(f"{project.get('name', '')}: {project.get('description', '')}".rstrip(": "))

    return "\n".join(lines).strip()


def _check_public_url(url: str) -> str:
    """Reject URLs that are not http(s) or whose host resolves to a non-public address."""
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationError(detail="resumeUrl: must be an http(s) URL")

    try:
        port = parsed.port or (443 if parsed.scheme == "https" else 80)
    except ValueError as exc:
        raise ValidationError(detail="resumeUrl: must be an http(s) URL") from exc

    try:
        addresses = socket.getaddrinfo(parsed.hostname, port, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as exc:
        raise ValidationError(detail="resumeUrl: host could not be resolved") from exc

    for _family, _type, _proto, _canonname, sockaddr in addresses:
        address = ipaddress.ip_address(sockaddr[0].split("%", 1)[0])
        if address.version == 6 and address.ipv4_mapped:
            address = address.ipv4_mapped
        if (
            address.is_private
            or address.is_loopback
            or address.is_link_local
            or address.is_reserved
            or address.is_multicast
            or address.is_unspecified
        ):
            raise ValidationError(detail="resumeUrl: host is not publicly reachable")
    return parsed.hostname


def fetch_resume_text(url: str, *, timeout: float) -> str:
    """Download a résumé by URL and return its text (PDF or plain text).

    Redirects are followed by hand so every hop is checked against the
    public-address rule before it is requested.
    """
    host = _check_public_url(url)
    try:
        for _ in range(MAX_RESUME_REDIRECTS + 1):
            with requests.get(url, timeout=timeout, stream=True, allow_redirects=False) as response:
                if response.is_redirect:
                    url = urljoin(url, response.headers.get("Location", ""))
                    host = _check_public_url(url)
                    continue
                response.raise_for_status()
                content_type = (response.headers.get("Content-Type") or "").lower()
                raw = _read_capped(response)
                break
        else:
            raise ValidationError(detail="resumeUrl: too many redirects")
    except requests.RequestException as exc:
        current_app.logger.warning("Failed to download resume from %s: %s", host, exc)
        raise UpstreamError("Unable to download the resume. Please try again.") from exc

    path = urlparse(url).path.lower()
    if "pdf" in content_type or path.endswith(".pdf") or raw.startswith(b"%PDF"):
        return extract_pdf_text(raw)
    return raw.decode("utf-8", errors="ignore")[:MAX_STORED_TEXT_LENGTH].strip()


def _read_capped(response: requests.Response) -> bytes:
    received = bytearray()
    for chunk in response.iter_content(chunk_size=64 * 1024):
        received.extend(chunk)
        if len(received) > MAX_RESUME_DOWNLOAD_BYTES:
            raise ValidationError(detail="resumeUrl: file is too large")
    return bytes(received)
