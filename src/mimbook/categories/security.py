"""
Security playbook

Diagnosis only. Containment of a suspected breach must be coordinated with
the CISO and Legal, so this playbook inherits the generic containment steps
and its diagnosis ends with a critical stop-and-escalate alert.
"""

from ..models import AlertBox, ContentBlock, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps

ESCALATION_ALERT = (
    "SECURITY INCIDENT HANDLING: If you confirm a breach or data exfiltration — STOP. "
    "Escalate immediately to the CISO and Legal team BEFORE taking any containment "
    "action. Containment may need to be coordinated with law enforcement."
)


@register_playbook
class SecurityPlaybook(CategoryPlaybook):
    category = Category.SECURITY

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        blocks: list[ContentBlock] = steps(
            f"""
            **Check SIEM for correlated alerts.**

            Open your SIEM (Splunk / QRadar / Sentinel / Elastic SIEM) and run:
            ```
            index=security host={ci} earliest=-30m | stats count by source, severity
            ```

            Look for:
            • Authentication failures spike
            • Lateral movement indicators (unusual logins across multiple hosts)
            • Data exfiltration indicators (large outbound transfers)
            • Malware signatures or C2 beaconing

            ✅ **Good**: No correlated security alerts
            ❌ **Bad**: Multiple security alerts firing simultaneously → this is likely a coordinated attack or breach
            ⚡ **Decision**: Any indicator of compromise → stop and escalate (see alert below)
            """,
            """
            **Check authentication logs for anomalies.**

            ```
            # Linux auth log:
            grep -i "failed\\|invalid\\|breach" /var/log/auth.log | tail -100
            grep -i "accepted\\|opened" /var/log/auth.log | awk '{print $9}' | sort | uniq -c | sort -rn | head -20

            # Windows Event Log (Security):
            Get-WinEvent -LogName Security -MaxEvents 100 | Where {$_.Id -in @(4625,4648,4672,4720)} | Format-List
            ```

            ✅ **Good**: Failures at baseline, logins from known sources only
            ❌ **Bad**: Burst of failures followed by a success, or logins from unknown hosts

            ⚠️ **IMPORTANT**: If you suspect an active breach, do NOT power off affected systems — this destroys forensic evidence. Isolate from network instead.
            """,
            """
            **Check DLP (Data Loss Prevention) alerts.**

            Verify if any sensitive data may have been exfiltrated:
            • Check DLP console for alerts in last 24 hours
            • Look for large transfers to external IPs
            • Check firewall logs for unusual outbound connections

            ```
            netstat -an | grep ESTABLISHED | grep -v "127.0.0.1\\|10.\\|192.168.\\|172." | head -20
            ```

            ✅ **Good**: No DLP alerts, outbound connections only to known endpoints
            ❌ **Bad**: Sustained transfers to unknown external addresses → treat as exfiltration
            """,
        )
        blocks.append(AlertBox(alert_level="critical", text=ESCALATION_ALERT))
        return blocks
