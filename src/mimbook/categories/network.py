"""Network playbook: reachability, routing, firewall, DNS and CDN."""

from ..models import ContentBlock, DecisionBranch, DecisionTree, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps


@register_playbook
class NetworkPlaybook(CategoryPlaybook):
    category = Category.NETWORK

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        service = incident.affected_service
        blocks: list[ContentBlock] = steps(
            f"""
            **Confirm reachability from multiple vantage points.**

            ```
            # From your workstation:
            ping -c 5 {ci}
            traceroute {ci}
            mtr --report {ci}

            # From another host in the same region ({incident.region or "same region as the CI"}):
            ssh jump-host "ping -c 5 {ci}"
            ssh jump-host "curl -o /dev/null -s -w '%{{http_code}}' https://{ci}/health"
            ```

            ✅ **Good**: Reachable from all vantage points, <10ms latency
            ❌ **Bad**: Unreachable from some/all → packet loss indicates routing or firewall issue
            ⚡ **Decision**: If reachable from internal but not external → check firewall/CDN (Step 3)
            """,
            f"""
            **Check routing tables and BGP status.**

            ```
            # Check routing:
            ip route show
            netstat -rn

            # For BGP environments (check with network team):
            show ip bgp summary   # (on router/switch)
            show ip route bgp

            # Check DNS resolution:
            dig {ci}
            nslookup {ci}
            ```

            ✅ **Good**: Correct routes present, BGP peers UP, DNS resolves correctly
            ❌ **Bad**: Missing routes, BGP peer DOWN, DNS returns wrong IP → network team escalation required
            ⚡ **Decision**: Routing problem → Section 5, Step 1; DNS problem → Section 5, Step 3
            """,
            f"""
            **Check firewall and security group rules.**

            Verify no rule was recently changed that blocks traffic to/from {ci}:
            ```
            # Linux firewall:
            sudo iptables -L -n -v | head -50
            sudo firewall-cmd --list-all

            # AWS Security Groups (if applicable):
            aws ec2 describe-security-groups --group-ids [SG_ID] --query 'SecurityGroups[*].IpPermissions'
            ```

            ✅ **Good**: No rule changes in the last 4 hours
            ❌ **Bad**: A rule now drops traffic that used to be allowed
            ⚡ **Decision**: If a rule was changed in last 4 hours → revert the change (Section 5, Step 2)
            """,
            f"""
            **Check CDN and load balancer health.**

            Verify CDN edge nodes are serving traffic and not returning errors:
            ```
            curl -I -H "Host: {service}" https://[CDN_EDGE_IP]/health
            curl -I https://{service}/health
            ```

            Check load balancer health page in your cloud console or management tool. Look for:
            • Backend instance health checks failing
            • SSL certificate expiry (check expiry date)
            • Origin connection errors

            ✅ **Good**: Edge and origin both return 200, certificates valid
            ❌ **Bad**: Edge errors while origin is healthy → CDN fault
            ⚡ **Decision**: CDN or load balancer fault → Section 5, Step 4
            """,
        )
        blocks.append(
            DecisionTree(
                condition="What did network diagnosis reveal?",
                branches=[
                    DecisionBranch(
                        condition="BGP peer down or routing change",
                        action="Section 5, Step 1: Revert routing change or failover to backup link",
                    ),
                    DecisionBranch(
                        condition="Firewall rule blocking traffic",
                        action="Section 5, Step 2: Revert firewall rule change",
                    ),
                    DecisionBranch(
                        condition="DNS misconfiguration",
                        action="Section 5, Step 3: Fix DNS record and force propagation",
                    ),
                    DecisionBranch(
                        condition="CDN/Load balancer issue",
                        action="Section 5, Step 4: Bypass CDN or failover load balancer",
                    ),
                    DecisionBranch(
                        condition="Unresolved — no root cause found",
                        action="Escalate to Senior Network Engineer and vendor (Section 6)",
                    ),
                ],
            )
        )
        return blocks

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        return steps(
            f"""
            **Revert the routing change / re-advertise the route.**

            ⚠️ CAB required.

            ```
            # Rollback network change via your network management tool
            # Or re-advertise the withdrawn BGP route
            # Specific commands depend on your network vendor — contact your network team
            ```

            **Impact**: Route convergence can cause a few seconds of packet loss across the affected prefixes.
            **Rollback**: Re-apply the original change if the revert makes reachability worse.

            **Validate**: Run `traceroute {ci}` from multiple vantage points.
            """,
            """
            **Revert firewall rule change.**

            ```
            # Linux iptables — remove the blocking rule:
            sudo iptables -D INPUT -s [BLOCKED_IP] -j DROP

            # AWS Security Group — restore the inbound rule:
            aws ec2 authorize-security-group-ingress \\
              --group-id [SG_ID] \\
              --protocol tcp --port [PORT] --cidr [CIDR]
            ```

            **Impact**: Traffic the rule was blocking is allowed again; confirm with Security that the rule was not a deliberate block.
            **Rollback**: Re-insert the rule with `sudo iptables -I INPUT -s [BLOCKED_IP] -j DROP` or `aws ec2 revoke-security-group-ingress`.
            """,
            f"""
            **Fix the DNS record and force propagation.**

            ```
            # Inspect the current record:
            dig {ci} +short
            # AWS Route 53 — restore the correct record:
            aws route53 change-resource-record-sets --hosted-zone-id [ZONE_ID] \\
              --change-batch file://restore-dns.json
            ```

            **Impact**: Clients keep the bad answer until their cached TTL expires.
            **Rollback**: Re-apply the previous record set from the Route 53 change history.
            """,
            f"""
            **Bypass CDN and route traffic directly to origin.**

            ⚠️ CAB required — origin will take full uncached load.

            Update DNS to point directly to origin load balancer (bypasses CDN caching and edge issues):
            ```
            # AWS Route 53 — update record to point to ALB:
            aws route53 change-resource-record-sets --hosted-zone-id [ZONE_ID] \\
              --change-batch file://failover-dns.json
            ```

            **Impact**: Origin load increases sharply; watch origin CPU and connection counts.
            **Monitor**: DNS propagation takes 1-5 minutes. Monitor via: `watch -n 10 "dig {ci} @8.8.8.8"`
            **Rollback**: Revert DNS record back to CDN CNAME once CDN issue is resolved.
            """,
        )
