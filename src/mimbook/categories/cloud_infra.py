"""Cloud and infrastructure playbook: provider status, compute, IAM, autoscaling."""

from ..models import ContentBlock, DecisionBranch, DecisionTree, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps


@register_playbook
class CloudInfraPlaybook(CategoryPlaybook):
    category = Category.CLOUD_INFRA

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        region = incident.region or "your region"
        blocks: list[ContentBlock] = steps(
            f"""
            **Check cloud provider status and AZ health.**

            Before assuming your config is broken, check if the cloud provider has an active incident:
            • AWS: https://health.aws.amazon.com/health/status
            • Azure: https://azure.status.microsoft/
            • GCP: https://status.cloud.google.com/

            If there is an active provider-side incident → note the incident ID, post to Slack, and move to Section 5, Step 4 (failover to backup region).

            ✅ **Good**: All provider services operational in {region}
            ❌ **Bad**: Provider incident active → escalate to vendor (Section 6) and prepare failover
            """,
            f"""
            **Check compute instance / container health.**

            ```
            # AWS EC2:
            aws ec2 describe-instance-status --instance-ids [INSTANCE_IDS] --include-all-instances
            aws ec2 get-console-output --instance-id [INSTANCE_ID]

            # Kubernetes:
            kubectl get nodes -o wide
            kubectl get pods -n production -o wide | grep -v "Running\\|Completed"
            kubectl describe node [UNHEALTHY_NODE]

            # Check autoscaling:
            aws autoscaling describe-auto-scaling-groups --auto-scaling-group-names [ASG_NAME]
            ```

            ✅ **Good**: All instances running/healthy, node Ready, autoscaling group healthy
            ❌ **Bad**: Instances impaired, nodes NotReady → check instance logs and system events
            ⚡ **Decision**: Impaired instances → Section 5, Step 1; desired capacity not reached → Section 5, Step 3
            """,
            """
            **Check IAM / permission changes.**

            A permission change can silently break services (S3 access denied, RDS connection refused):
            ```
            # AWS CloudTrail (last 4 hours):
            aws cloudtrail lookup-events \\
              --start-time $(date -u -v-4H +%Y-%m-%dT%H:%M:%SZ) \\
              --lookup-attributes AttributeKey=EventName,AttributeValue=PutRolePolicy

            # Also check: DeleteBucketPolicy, RevokeSecurityGroupIngress
            ```

            ✅ **Good**: No policy changes near the incident start
            ❌ **Bad**: AccessDenied errors begin right after a policy event
            ⚡ **Decision**: If IAM change found near incident start time → revert the permission change (Section 5, Step 2)
            """,
        )
        blocks.append(
            DecisionTree(
                condition="Cloud/Infra diagnosis outcome?",
                branches=[
                    DecisionBranch(
                        condition="Provider-side AZ/region incident",
                        action="Section 5, Step 4: Failover to secondary region",
                    ),
                    DecisionBranch(
                        condition="Compute instances impaired",
                        action="Section 5, Step 1: Replace/restart impaired instances",
                    ),
                    DecisionBranch(
                        condition="IAM/permission change",
                        action="Section 5, Step 2: Revert IAM change via CloudTrail event",
                    ),
                    DecisionBranch(
                        condition="Autoscaling stuck or misconfigured",
                        action="Section 5, Step 3: Manually scale out, fix ASG policy",
                    ),
                    DecisionBranch(
                        condition="Unknown",
                        action="Escalate to cloud architect; open cloud provider P1 case (Section 6)",
                    ),
                ],
            )
        )
        return blocks

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        return steps(
            """
            **Replace impaired instances / restart pods.**

            ```
            # AWS EC2 — terminate impaired instance (ASG will replace):
            aws ec2 terminate-instances --instance-ids [IMPAIRED_INSTANCE_ID]

            # Kubernetes — delete and reschedule pod:
            kubectl delete pod [POD_NAME] -n production
            # If node is impaired, cordon it:
            kubectl cordon [NODE_NAME]
            kubectl drain [NODE_NAME] --ignore-daemonsets --delete-emptydir-data
            ```

            **Impact**: Capacity drops until replacements pass health checks.
            **Rollback**: Terminated instances cannot be restored; `kubectl uncordon [NODE_NAME]` returns a drained node to service.
            """,
            """
            **Revert the IAM / permission change.**

            ⚠️ CAB required — permission changes affect every workload using the role.

            ```
            # Fetch the previous policy version and make it the default:
            aws iam list-policy-versions --policy-arn [POLICY_ARN]
            aws iam set-default-policy-version --policy-arn [POLICY_ARN] --version-id [PREVIOUS_VERSION]
            ```

            **Impact**: Any access granted by the new policy is withdrawn immediately.
            **Rollback**: Set the newer policy version back as default.
            """,
            """
            **Manually scale out and fix the autoscaling policy.**

            ```
            aws autoscaling set-desired-capacity --auto-scaling-group-name [ASG_NAME] --desired-capacity [N]
            aws autoscaling describe-scaling-activities --auto-scaling-group-name [ASG_NAME] --max-items 10
            kubectl scale deployment/[DEPLOYMENT] -n production --replicas=[N]
            ```

            **Impact**: Higher running cost until the group is scaled back.
            **Rollback**: Set desired capacity back to the previous value once the policy is fixed.
            """,
            """
            **Failover to backup region / AZ.**

            ⚠️ CAB required — high blast radius action.

            ```
            # AWS Route 53 health-check based failover:
            aws route53 change-resource-record-sets --hosted-zone-id [ZONE_ID] \\
              --change-batch '{"Changes":[{"Action":"UPSERT","ResourceRecordSet":{"Name":"[DOMAIN]","Type":"A","Failover":"SECONDARY","HealthCheckId":"[HC_ID]","TTL":60,"ResourceRecords":[{"Value":"[BACKUP_IP]"}]}}]}'
            ```

            **Impact**: All users are served from the secondary region; data written since the last replication point may be missing.
            **Rollback**: Fail back with the same command pointing at the primary record once the region recovers.
            **Validate**: Test from external after 60 seconds (TTL).
            """,
        )
