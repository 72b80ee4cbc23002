"""Fixed topic catalog loaded into the store at startup."""

from typing import List, Tuple

# (id, module_name, topic_name); ids are part of the public API.
TOPIC_SEED: List[Tuple[int, str, str]] = [
    (1, "Operating Systems", "Process Scheduling"),
    (2, "Operating Systems", "Inter-process Communication"),
    (3, "Operating Systems", "Paging & Segmentation"),
    (4, "Operating Systems", "Virtual Memory"),
    (5, "Operating Systems", "File Allocation"),
    (6, "Operating Systems", "Directory Structures"),
    (7, "DBMS", "ER Diagrams"),
    (8, "DBMS", "Normalization"),
    (9, "DBMS", "Select Queries"),
    (10, "DBMS", "Joins & Subqueries"),
    (11, "Computer Networks", "OSI Model"),
    (12, "Computer Networks", "TCP/IP Model"),
    (13, "Computer Networks", "IP Addressing"),
    (14, "Computer Networks", "Routing"),
]


def topic_rows() -> List[dict]:
    """Return the seed list as column dictionaries for a bulk insert."""
    return [{"id": tid, "module_name": module, "topic_name": name} for tid, module, name in TOPIC_SEED]
