"""MDAD Signal Datasets — CSV adapter and synthetic signal generator.
=====================================================================

Bridges external signal sources into the engine's Signal batches.

Supported sources:
    - Generic CSV (one signal per row, ISO-8601 timestamps)
    - Synthetic scenarios over five named operating regions

CSV columns:
    id, timestamp, latitude, longitude, domain, confidence, severity,
    description, source_type
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import numpy as np

from .mdad_types import Domain, Severity, Signal, SignalValidationError, to_base36

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["id", "timestamp", "latitude", "longitude", "domain",
               "confidence", "severity", "description", "source_type"]


# ===== CSV =====

class SignalCSVAdapter:
    """Read / write signal batches as CSV.

    Usage::

        signals = SignalCSVAdapter.load("feed.csv")
        clusters = cluster_signals(signals)
    """

    @staticmethod
    def load(filepath: str, delimiter: str = ',') -> List[Signal]:
        """Load signals in file order.

        Naive timestamps are taken as UTC.

        Raises:
            SignalValidationError: missing column or bad value, with line number
        """
        signals = []
        with open(filepath, newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            missing = [c for c in CSV_COLUMNS[:7] if c not in (reader.fieldnames or [])]
            if missing:
                raise SignalValidationError(f"{filepath}: missing columns {missing}")

            for row in reader:
                line = reader.line_num
                try:
                    ts = datetime.fromisoformat(row['timestamp'].strip())
                    if ts.tzinfo is None:
                        ts = ts.replace(tzinfo=timezone.utc)
                    signals.append(Signal(
                        id=row['id'],
                        timestamp=ts,
                        latitude=float(row['latitude']),
                        longitude=float(row['longitude']),
                        domain=row['domain'].strip().lower(),
                        confidence=float(row['confidence']),
                        severity=row['severity'].strip().lower(),
                        description=row.get('description') or "",
                        source_type=row.get('source_type') or "",
                    ))
                except (ValueError, TypeError, AttributeError) as exc:
                    raise SignalValidationError(f"{filepath}:{line}: {exc}") from exc

        logger.debug("loaded %d signals from %s", len(signals), filepath)
        return signals

    @staticmethod
    def save(signals: Sequence[Signal], filepath: str) -> None:
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_COLUMNS)
            for s in signals:
                writer.writerow([
                    s.id, s.timestamp.isoformat(), s.latitude, s.longitude,
                    s.domain.value, s.confidence, s.severity.value,
                    s.description, s.source_type,
                ])


# ===== SYNTHETIC =====

@dataclass(frozen=True)
class Region:
    name: str
    lat: float
    lon: float
    spread: float               # degrees, +/- around the center


REGIONS = (
    Region("Eastern Front", 48.5, 37.5, 2.0),
    Region("Northern Sector", 51.0, 31.0, 1.5),
    Region("Southern Zone", 46.5, 33.5, 1.8),
    Region("Western Border", 50.0, 24.0, 1.2),
    Region("Central Command", 50.4, 30.5, 0.8),
)

SOURCES = {
    Domain.PHYSICAL: (
        "SATINT-GEOSYNC-7", "RADAR-STATION-ALPHA", "DRONE-RECON-12",
        "GROUND-SENSOR-NET", "AWACS-PATROL", "SIGINT-POST-3",
    ),
    Domain.CYBER: (
        "NOC-MONITOR", "FIREWALL-CLUSTER", "DARKWEB-CRAWLER",
        "HONEYPOT-ALPHA", "IDS-NETWORK", "THREAT-INTEL-FEED",
    ),
    Domain.HUMINT: (
        "FIELD-ASSET-BRAVO", "LOCAL-CONTACT", "EMBASSY-REPORT",
        "OSINT-ANALYSIS", "SOCIAL-MONITOR", "CONFIDENTIAL-SOURCE",
    ),
}

DESCRIPTIONS = {
    Domain.PHYSICAL: (
        "Unusual vehicle convoy detected moving toward sector boundary",
        "Satellite imagery shows new defensive positions being constructed",
        "Radar contact: Unidentified aircraft entering restricted airspace",
        "Seismic sensors detect underground construction activity",
        "Thermal signatures indicate increased personnel at forward base",
        "Supply trucks observed on previously inactive route",
        "Mobile radar systems deployed in forward position",
        "Troop movements detected near critical infrastructure",
        "Artillery pieces repositioned to elevated terrain",
        "Camouflage netting activity at suspected staging area",
    ),
    Domain.CYBER: (
        "Spear phishing campaign targeting military personnel detected",
        "DDoS attack pattern emerging against communications infrastructure",
        "Malware signature matches known APT group tactics",
        "Unauthorized access attempt on classified network segment",
        "Dark web chatter indicates planned infrastructure attack",
        "Network scan activity from hostile IP range increased 300%",
        "Credential stuffing attack detected on admin portals",
        "Command and control beacon identified in network traffic",
        "Zero-day exploit attempt against VPN concentrators",
        "Data exfiltration pattern detected on border routers",
    ),
    Domain.HUMINT: (
        "Asset reports unusual activity at known adversary facility",
        "Local contact observes foreign nationals photographing installations",
        "Informant indicates planning meeting for operations",
        "Social media analysis shows coordinated disinformation campaign",
        "Embassy source reports unusual diplomatic movements",
        "Field operative confirms weapons cache at reported location",
        "Intercepted communication suggests imminent action",
        "Reliable source reports hostile force morale assessment",
        "Community contact reports suspicious vehicle surveillance",
        "Defector provides intelligence on operational planning",
    ),
}

# (center lat, center lon, domain or None for mixed)
DEMO_CLUSTER_CENTERS = (
    (48.8, 37.2, Domain.PHYSICAL),
    (50.2, 30.8, Domain.CYBER),
    (47.0, 33.0, None),
)

HISTORY_HOURS = 168.0


class SyntheticSignalGenerator:
    """Reproducible synthetic signal batches.

    Usage::

        gen = SyntheticSignalGenerator(seed=42)
        batch = gen.clustered()
        clusters = cluster_signals(batch)

    Args:
        seed: RNG seed
        now: Reference instant; defaults to the current UTC time
    """

    def __init__(self, seed: int = 42, now: Optional[datetime] = None):
        self.rng = np.random.RandomState(seed)
        self.now = now or datetime.now(timezone.utc)
        self._issued = set()

    def _choice(self, items):
        return items[self.rng.randint(len(items))]

    def _uniform(self, lo: float, hi: float) -> float:
        return float(self.rng.uniform(lo, hi))

    def _signal_id(self) -> str:
        stamp = to_base36(int(self.now.timestamp() * 1000))
        while True:
            suffix = "".join(self._choice("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")
                             for _ in range(4))
            sid = f"SIG-{stamp}-{suffix}"
            if sid not in self._issued:
                self._issued.add(sid)
                return sid

    def generate_signal(self, domain: Optional[Domain] = None,
                        hours_ago: Optional[float] = None) -> Signal:
        """One signal from a random region.

        Args:
            domain: Fixed domain, or random if None
            hours_ago: Age of the signal; uniform over the last 7 days if None
        """
        domain = domain or self._choice(list(Domain))
        region = self._choice(REGIONS)
        if hours_ago is None:
            hours_ago = self._uniform(0, HISTORY_HOURS)

        severity = self._choice(list(Severity))
        confidence = self._uniform(0.2, 0.85)
        if severity is Severity.CRITICAL:
            confidence = min(confidence + 0.1, 0.95)
        if severity is Severity.LOW:
            confidence = max(confidence - 0.1, 0.15)

        return Signal(
            id=self._signal_id(),
            timestamp=self.now - timedelta(hours=hours_ago),
            latitude=region.lat + self._uniform(-region.spread, region.spread),
            longitude=region.lon + self._uniform(-region.spread, region.spread),
            domain=domain,
            confidence=round(confidence, 2),
            severity=severity,
            description=self._choice(DESCRIPTIONS[domain]),
            source_type=self._choice(SOURCES[domain]),
        )

    def historical(self, count: int = 50) -> List[Signal]:
        """Balanced batch over the last 7 days, newest first."""
        signals = []
        for _ in range(count // 3):
            for domain in (Domain.PHYSICAL, Domain.CYBER, Domain.HUMINT):
                signals.append(self.generate_signal(domain, self._uniform(0, HISTORY_HOURS)))
        while len(signals) < count:
            signals.append(self.generate_signal(None, self._uniform(0, HISTORY_HOURS)))
        return sorted(signals, key=lambda s: s.timestamp, reverse=True)

    def clustered(self, n_scattered: int = 15) -> List[Signal]:
        """Three intentional clusters plus scattered background, newest first.

        Cluster k is centered 12*k hours in the past (+/- 6 h per signal),
        with 4-7 members jittered +/- 0.3 degrees around its center.
        """
        signals = []
        for idx, (lat, lon, domain) in enumerate(DEMO_CLUSTER_CENTERS):
            size = 4 + self.rng.randint(4)
            base_hours = idx * 12.0
            for _ in range(size):
                d = domain or self._choice(list(Domain))
                s = self.generate_signal(d, base_hours + self._uniform(-6, 6))
                signals.append(replace(
                    s,
                    latitude=lat + self._uniform(-0.3, 0.3),
                    longitude=lon + self._uniform(-0.3, 0.3),
                ))

        for _ in range(n_scattered):
            signals.append(self.generate_signal())

        return sorted(signals, key=lambda s: s.timestamp, reverse=True)
