# sample_data.py
"""Starter forest shown when no saved tree exists."""

from typing import List

from tree import OIDNode

# (id, oid, name, description)
SAMPLE_RECORDS = [
    ("iso", "1", "ISO", "International Organization for Standardization"),
    ("iso-member", "1.2", "ISO Member Body", None),
    ("iso-us", "1.2.840", "US (ANSI)", "American National Standards Institute"),
    ("iso-us-company", "1.2.840.113549", "RSA Data Security Inc.", None),
    ("pkcs", "1.2.840.113549.1", "PKCS", "Public Key Cryptography Standards"),
    ("iso-org", "1.3", "ISO Identified Organization", None),
    ("dod", "1.3.6", "US Department of Defense", None),
    ("internet", "1.3.6.1", "Internet", None),
    ("private", "1.3.6.1.4", "Private", None),
    ("enterprise", "1.3.6.1.4.1", "Enterprise", "Private enterprise OIDs"),
    ("security", "1.3.6.1.5", "Security", None),
    ("mechanisms", "1.3.6.1.5.5", "Security Mechanisms", None),
    ("itu-t", "0", "ITU-T", "International Telecommunication Union - Telecommunication"),
    ("recommendation", "0.0", "Recommendation", None),
    ("rec-a", "0.0.1", "A-Series", "Organization of the work of ITU-T"),
    ("admin", "0.2", "Administration", None),
    ("joint", "2", "Joint ISO/ITU-T", "Joint assignments by ISO and ITU-T"),
    ("country", "2.16", "Country", None),
    ("nl", "2.16.528", "Netherlands", None),
    ("nl-1", "2.16.528.1", "Dutch Organizations", None),
    ("nl-healthcare", "2.16.528.1.1003", "Dutch Healthcare", "OID arc for Dutch healthcare organizations"),
    ("nl-healthcare-1", "2.16.528.1.1003.1", "Healthcare Providers", "Dutch healthcare provider organizations"),
    ("nl-healthcare-2", "2.16.528.1.1003.2", "Healthcare Systems", "Dutch healthcare information systems"),
    ("nl-healthcare-3", "2.16.528.1.1003.3", "Custom Healthcare Arc", "Your custom OID arc for healthcare applications"),
    ("your-org", "2.16.528.1.1003.3.1", "Your Organization", "Your organization's OID namespace"),
    ("us", "2.16.840", "United States", None),
]


def sample_nodes() -> List[OIDNode]:
    return [OIDNode(id=i, oid=o, name=n, description=d) for i, o, n, d in SAMPLE_RECORDS]

