#!/usr/bin/env python3
"""
MDAD Demo — Multi-Domain Threat Fusion from the Command Line
=============================================================

Run with:
    python -m mdad.demo                        # Synthetic clustered batch
    python -m mdad.demo --input feed.csv       # Your own signals
    python -m mdad.demo --plot --save          # Save a PNG map (headless)
    python -m mdad.demo --report out.json      # Export the JSON report

Clusters a signal batch, prints each threat with its predicted intents
and recommended response, then the alert feed for the chosen threshold.
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

from .mdad_datasets import SignalCSVAdapter, SyntheticSignalGenerator
from .mdad_engine import ThreatFusionEngine, filter_alerts, recommended_action
from .mdad_metrics import compute_dashboard_metrics
from .mdad_report import export_report
from .mdad_types import AlertConfig, ConfigurationError, Domain, SignalValidationError

DOMAIN_COLORS = {
    Domain.PHYSICAL: '#3b82f6',
    Domain.CYBER: '#ef4444',
    Domain.HUMINT: '#22c55e',
}


def print_threats(threats):
    if not threats:
        print("  No clusters formed.")
        return
    print(f"  {'ID':<22}{'CONF':>5}  {'STATUS':<11}{'N':>3}  {'RADIUS':>8}  X  PRIORITY")
    for t in threats:
        rec = recommended_action(t.confidence_score)
        print(f"  {t.id:<22}{t.confidence_score:>5}  {t.status.value:<11}"
              f"{t.signal_count:>3}  {t.radius_km:>6.1f}km  "
              f"{'*' if t.cross_domain_bonus else ' '}  {rec.priority}")
        for intent in t.predicted_intents:
            print(f"      -> {intent.vector.value:<18} {intent.target.value:<15} "
                  f"p={intent.probability:.2f}  {intent.timeline.value}")


def plot_threats(signals, threats, save_path=None):
    """Signal scatter by domain with cluster centers and radii."""
    import matplotlib.pyplot as plt
    import numpy as np

    fig, ax = plt.subplots(figsize=(10, 8))
    for domain, color in DOMAIN_COLORS.items():
        pts = [(s.longitude, s.latitude) for s in signals if s.domain is domain]
        if pts:
            xy = np.array(pts)
            ax.scatter(xy[:, 0], xy[:, 1], s=18, c=color, label=domain.value, alpha=0.8)

    for t in threats:
        # km -> degrees; longitude scaled by latitude
        r_lat = t.radius_km / 111.0
        r_lon = r_lat / max(np.cos(np.radians(t.center_lat)), 1e-6)
        theta = np.linspace(0, 2 * np.pi, 90)
        ax.plot(t.center_lon + r_lon * np.cos(theta),
                t.center_lat + r_lat * np.sin(theta),
                color='k', lw=1.0, alpha=0.6)
        ax.annotate(f"{t.confidence_score}", (t.center_lon, t.center_lat),
                    ha='center', va='center', fontsize=8, weight='bold')

    ax.set_xlabel('Longitude [deg]')
    ax.set_ylabel('Latitude [deg]')
    ax.set_title(f'MDAD threat clusters ({len(threats)} from {len(signals)} signals)')
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=150)
        print(f"  Map saved to: {save_path}")
    return fig


def run_demo(seed=42, input_path=None, radius_km=50.0, window_hours=72.0,
             threshold=40.0, report_path=None, plot=False, save=False,
             output_dir='.'):
    """Run one fusion pass and print the results."""
    config = AlertConfig(spatial_radius_km=radius_km,
                         temporal_window_hours=window_hours,
                         min_confidence_threshold=threshold)
    now = datetime.now(timezone.utc)

    if input_path:
        signals = SignalCSVAdapter.load(input_path)
        print(f"━━━ Loaded {len(signals)} signals from {input_path} ━━━")
    else:
        signals = SyntheticSignalGenerator(seed=seed, now=now).clustered()
        print(f"━━━ Synthetic batch: {len(signals)} signals (seed={seed}) ━━━")

    engine = ThreatFusionEngine(config, clock=lambda: now)
    result = engine.process(signals)
    threats = result.clusters

    print(f"  Radius {config.spatial_radius_km:g} km | Window {config.temporal_window_hours:g} h"
          f" | Clusters {len(threats)} | Unclustered {len(result.unclustered)}"
          f" | {result.total_time_s * 1000:.1f} ms")
    print()
    print_threats(threats)

    alerts = filter_alerts(threats, config)
    print(f"\n━━━ Alert feed (threshold {config.min_confidence_threshold:g}%) ━━━")
    for t in alerts:
        print(f"  [{recommended_action(t.confidence_score).priority:<8}] {t.id}  "
              f"{recommended_action(t.confidence_score).action}")
    if not alerts:
        print("  No alerts above threshold.")

    metrics = compute_dashboard_metrics(signals, threats, now)
    if report_path:
        path = export_report(report_path, metrics, threats, signals, exported_at=now)
        print(f"\n  Report written to: {path}")

    if plot:
        import matplotlib
        if save:
            matplotlib.use('Agg')
        import matplotlib.pyplot as plt

        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, 'mdad_threat_map.png') if save else None
        plot_threats(signals, threats, save_path=path)
        if not save:
            try:
                plt.show()
            except Exception:
                print("  (No display available — use --save to export PNGs)")

    return result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='MDAD Demo — Multi-Domain Threat Fusion',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mdad.demo                          # Synthetic batch, default config
  python -m mdad.demo --radius 25 --window 24  # Tighter clustering
  python -m mdad.demo --input feed.csv -v      # CSV input, debug logging
  python -m mdad.demo --plot --save -o out     # Save threat map PNG
""")
    parser.add_argument('--seed', type=int, default=42,
                        help='Synthetic batch seed (default: 42)')
    parser.add_argument('--input', '-i', type=str, default=None,
                        help='CSV file of signals instead of a synthetic batch')
    parser.add_argument('--radius', type=float, default=50.0,
                        help='Spatial radius in km (default: 50)')
    parser.add_argument('--window', type=float, default=72.0,
                        help='Temporal window in hours (default: 72)')
    parser.add_argument('--threshold', type=float, default=40.0,
                        help='Alert confidence threshold 0-100 (default: 40)')
    parser.add_argument('--report', type=str, default=None,
                        help='Write JSON report to this file or directory')
    parser.add_argument('--plot', action='store_true',
                        help='Plot signals and clusters (needs matplotlib)')
    parser.add_argument('--save', action='store_true',
                        help='Save PNG instead of displaying')
    parser.add_argument('--output-dir', '-o', type=str, default='.',
                        help='Output directory for PNGs (default: current)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        run_demo(seed=args.seed, input_path=args.input, radius_km=args.radius,
                 window_hours=args.window, threshold=args.threshold,
                 report_path=args.report, plot=args.plot, save=args.save,
                 output_dir=args.output_dir)
    except (ConfigurationError, SignalValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
