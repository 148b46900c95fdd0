"""Fallback playbook for categories without dedicated content."""

from ..models import ContentBlock, DecisionBranch, DecisionTree, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps


@register_playbook
class GenericPlaybook(CategoryPlaybook):
    category = Category.GENERIC

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        blocks: list[ContentBlock] = steps(
            f"""
            **Check primary health endpoint.**

            ```
            curl -v -m 10 https://{ci}/health
            curl -v -m 10 https://{ci}/status
            ping -c 5 {ci}
            ```

            ✅ **Good**: 200 OK response, ping responding
            ❌ **Bad**: Timeout, 5xx error, no route to host → proceed to Step 2
            ⚡ **Decision**: Host unreachable → Section 5, Step 3 (failover) while the host is investigated
            """,
            f"""
            **Check system logs for errors (last 30 minutes).**

            ```
            sudo journalctl -u {ci} --since "30 minutes ago" | grep -i "error\\|fatal\\|critical"
            tail -200 /var/log/syslog | grep -i "error\\|fail\\|critical"
            ```

            ✅ **Good**: No new error patterns
            ❌ **Bad**: New errors → document them verbatim; search for known fixes
            ⚡ **Decision**: Service crashed or hung → Section 5, Step 1 (restart)
            """,
            """
            **Check system resources.**

            ```
            top -b -n 1 | head -20
            df -h
            free -h
            netstat -s | grep -i "failed\\|retransmit\\|error"
            ```

            ✅ **Good**: CPU < 80%, Memory available, Disk < 85%
            ❌ **Bad**: Resource exhaustion → immediate escalation required
            """,
            f"""
            **Check recent deployments and configuration changes.**

            Query your deployment tool and change management system for changes to '{ci}' in the last 4 hours.

            ✅ **Good**: No changes in the window
            ❌ **Bad**: A change was made shortly before detection
            ⚡ **Decision**: If a change was made → rollback is the fastest path to service restoration (Section 5, Step 2)
            """,
        )
        blocks.append(
            DecisionTree(
                condition="What did the investigation show?",
                branches=[
                    DecisionBranch(
                        condition="Service crashed or hung",
                        action="Section 5, Step 1: Restart the affected service",
                    ),
                    DecisionBranch(
                        condition="Recent change identified",
                        action="Section 5, Step 2: Rollback most recent change",
                    ),
                    DecisionBranch(
                        condition="Host or site lost",
                        action="Section 5, Step 3: Failover to backup/standby",
                    ),
                    DecisionBranch(
                        condition="No root cause found",
                        action=f"Escalate to the {incident.assignment_group} senior engineer and the owning vendor (Section 6)",
                    ),
                ],
            )
        )
        return blocks

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        return steps(
            f"""
            **Restart the affected service (first, safest option).**

            ```
            sudo systemctl restart {ci}
            sudo systemctl status {ci}
            ```

            **Impact**: Service unavailable for the duration of the restart.
            **Rollback**: Not applicable; a restart has nothing to undo.
            **Validate**: Check health endpoint within 2 minutes. If no improvement → go to Step 2.
            """,
            f"""
            **Rollback most recent change.**

            Identify the most recent change to {ci} and revert it. Contact the change owner and ask them to revert via normal rollback procedure.

            ⚠️ CAB required for all production rollbacks.

            **Impact**: Whatever the change delivered is withdrawn.
            **Rollback**: Re-apply the change once it has been fixed and re-approved.
            """,
            f"""
            **Failover to backup/standby (if available).**

            If a backup system or standby environment exists for '{incident.affected_service}', activate it now. Update DNS/load balancer to route traffic to the backup.

            ⚠️ CAB required — high blast radius action.

            **Impact**: Users are served from the standby; confirm its data is current before switching.
            **Rollback**: Point DNS/load balancer back at the primary once it is healthy.

            Get specific failover procedure from: [LINK TO DR PROCEDURE]
            """,
        )
