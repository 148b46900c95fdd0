"""Application playbook: APM, logs, deployments and feature flags."""

from ..models import ContentBlock, DecisionBranch, DecisionTree, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps


@register_playbook
class ApplicationPlaybook(CategoryPlaybook):
    category = Category.APPLICATION

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        service = incident.affected_service
        blocks: list[ContentBlock] = steps(
            f"""
            **Check error rate and latency in APM.**

            Open your APM dashboard (DataDog / New Relic / Dynatrace / CloudWatch) for '{service}'.

            Look for:
            • Error rate > 1% (baseline) → is it now 10%? 50%? 100%?
            • P99 latency spike (when did it spike? correlates to deployment or upstream change?)
            • Specific endpoints/operations with highest error rates

            ✅ **Good**: Error rate and latency within normal range
            ❌ **Bad**: Error rate > 5% or P99 > 10x baseline → record exact error types and go to Step 2
            ⚡ **Decision**: Errors concentrated on calls to a dependency → treat it as an upstream failure
            """,
            f"""
            **Check application error logs.**

            ```
            # Kubernetes pods:
            kubectl logs -n production deployment/{ci} --since=30m | grep -i "error\\|fatal\\|exception" | tail -100
            kubectl get events -n production --sort-by='.lastTimestamp' | tail -30

            # Docker:
            docker logs {ci} --since 30m 2>&1 | grep -i "error\\|fatal" | tail -100

            # Traditional host:
            sudo journalctl -u {ci} --since "30 minutes ago" | grep -i "error\\|fatal"
            tail -200 /var/log/{ci}/app.log | grep -i "ERROR\\|FATAL"
            ```

            ✅ **Good**: Normal log volume, no new error patterns
            ❌ **Bad**: New error patterns (NullPointerException, ConnectionRefused, OutOfMemoryError) → record and go to Step 4
            ⚡ **Decision**: OutOfMemoryError or OOMKilled events → Section 5, Step 3
            """,
            f"""
            **Check deployment history (last 4 hours).**

            Check your deployment pipeline (Jenkins / GitHub Actions / ArgoCD / Spinnaker) for:
            • Any deployment to {ci} or its dependencies in last 4 hours
            • Time of deployment vs. time of first alert (within 15 minutes = likely causal)
            • What changed: code diff, config change, feature flag change

            ✅ **Good**: No deployments in the window
            ❌ **Bad**: A release landed shortly before the first alert
            ⚡ **Decision**: Deployment within 2 hours → go to Section 5, Step 1 for rollback
            """,
            f"""
            **Check feature flags and configuration.**

            If your org uses a feature flag system (LaunchDarkly / Flagsmith / Unleash):
            • Check if any flag was recently toggled for {service}
            • Check for config changes in your config management system (Consul / etcd / AWS Parameter Store)

            ```
            # Example: AWS Parameter Store change history
            aws ssm get-parameter-history --name /prod/{ci}/config --max-items 5
            ```

            ✅ **Good**: No flag or config changes in last 4 hours
            ❌ **Bad**: Flag/config changed recently → Section 5, Step 2: revert flag/config
            """,
        )
        blocks.append(
            DecisionTree(
                condition="Application diagnosis outcome?",
                branches=[
                    DecisionBranch(
                        condition="Recent deployment identified",
                        action="Section 5, Step 1: Rollback deployment",
                    ),
                    DecisionBranch(
                        condition="Feature flag / config change",
                        action="Section 5, Step 2: Revert flag or config",
                    ),
                    DecisionBranch(
                        condition="Memory leak / OOM",
                        action="Section 5, Step 3: Restart pods/instances, then investigate heap dumps",
                    ),
                    DecisionBranch(
                        condition="Upstream dependency failure (DB, API, cache)",
                        action="Investigate the upstream dependency: restart diagnosis loop for that CI",
                    ),
                    DecisionBranch(
                        condition="No clear cause",
                        action="Escalate to senior engineer; consider blue/green failover (Section 5, Step 4)",
                    ),
                ],
            )
        )
        return blocks

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        return steps(
            f"""
            **Rollback deployment to last known-good version.**

            ⚠️ CAB required in production.

            ```
            # Kubernetes:
            kubectl rollout undo deployment/{ci} -n production
            kubectl rollout status deployment/{ci} -n production --timeout=5m

            # Docker Swarm:
            docker service update --rollback {ci}

            # Traditional (restart with previous version):
            sudo systemctl stop {ci}
            # Replace binary/artifact with previous version
            sudo systemctl start {ci}
            ```

            **Impact**: Rolling replacement of instances; features from the bad release are withdrawn.
            **Rollback**: Re-deploy the newer version with `kubectl rollout undo` again once fixed.
            **Validate**: Check error rate in APM dashboard within 2 minutes of rollback.
            """,
            """
            **Disable problematic feature flag.**

            If a feature flag was recently enabled, turn it OFF:
            ```
            # LaunchDarkly CLI:
            launchdarkly flags update [FLAG_KEY] --off --environment production

            # Or via API:
            curl -X PATCH https://app.launchdarkly.com/api/v2/flags/default/[FLAG_KEY] \\
              -H "Authorization: [API_KEY]" \\
              -d '[{"op":"replace","path":"/environments/production/on","value":false}]'
            ```

            **Impact**: Users lose access to the flagged feature.
            **Rollback**: Turn the flag back on once the defect is fixed.
            **Validate**: Error rate should drop within 1-2 minutes.
            """,
            f"""
            **Restart affected services (last resort — short-term fix only).**

            ```
            # Kubernetes — rolling restart:
            kubectl rollout restart deployment/{ci} -n production

            # Systemd:
            sudo systemctl restart {ci}

            # ECS:
            aws ecs update-service --cluster production --service {ci} --force-new-deployment
            ```

            **Impact**: Brief capacity drop during the rolling restart.
            **Rollback**: Not applicable; a restart has nothing to undo.

            ⚠️ **Note**: A restart may mask the root cause. Capture heap dumps and thread dumps BEFORE restarting if OOM or deadlock is suspected:
            `jmap -dump:format=b,file=/tmp/heapdump.hprof [PID]`
            """,
            f"""
            **Blue/green failover to the standby environment.**

            ⚠️ CAB required — high blast radius action.

            ```
            # Kubernetes — point the service selector at the standby colour:
            kubectl patch service {ci} -n production -p '{{"spec":{{"selector":{{"colour":"[STANDBY_COLOUR]"}}}}}}'
            # AWS ALB — shift listener weight to the standby target group:
            aws elbv2 modify-listener --listener-arn [LISTENER_ARN] --default-actions file://standby-forward.json
            ```

            **Impact**: All traffic moves to the standby stack; its data and version must match production.
            **Rollback**: Patch the selector (or listener) back to the original colour.
            """,
        )
