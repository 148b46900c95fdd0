"""
Database playbook

Covers Oracle RAC, MySQL/Aurora and PostgreSQL clusters.
"""

from ..models import ContentBlock, DecisionBranch, DecisionTree, Incident
from .base import Category, CategoryPlaybook, register_playbook, steps


@register_playbook
class DatabasePlaybook(CategoryPlaybook):
    category = Category.DATABASE

    def diagnosis_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        blocks: list[ContentBlock] = steps(
            f"""
            **Check cluster/node health.**

            SSH to primary node: `ssh admin@{ci}`
            Check cluster status:
            ```
            # For Oracle RAC:
            srvctl status database -d $(srvctl config database | head -1)
            crsctl status resource -t | grep -E "(ONLINE|OFFLINE|UNKNOWN)"

            # For MySQL/Aurora:
            mysqlsh --uri admin@{ci} -- cluster.status()

            # For PostgreSQL:
            psql -h {ci} -U postgres -c "SELECT pg_is_in_recovery();"
            ```

            ✅ **Good**: All nodes ONLINE, primary responding
            ❌ **Bad**: Nodes OFFLINE or UNKNOWN → proceed to Step 2
            ⚡ **Decision**: If all nodes show ONLINE but DB is unresponsive → go to Step 3 (connection pool exhaustion)
            """,
            """
            **Check database error logs (last 30 minutes).**

            ```
            # Oracle alert log:
            tail -500 /u01/app/oracle/diag/rdbms/*/*/trace/alert_*.log
            grep -i "ORA-" /u01/app/oracle/diag/rdbms/*/*/trace/alert_*.log | tail -50

            # MySQL:
            mysqlsh -- dba.getCluster().status()
            tail -200 /var/log/mysql/error.log

            # PostgreSQL:
            grep "FATAL\\|ERROR\\|PANIC" /var/log/postgresql/postgresql-*.log | tail -50
            ```

            ✅ **Good**: Only routine messages
            ❌ **Bad**: ORA-04031 (shared pool), ORA-00060 (deadlocks), ORA-12170 (connection timeout) → document errors and go to Step 4
            ⚡ **Decision**: Memory errors point to Section 5, Step 1 (failover); deadlocks point to Section 5, Step 3
            """,
            """
            **Check connection pool exhaustion.**

            ```
            # Oracle — check active sessions:
            SELECT COUNT(*) FROM v$session WHERE status = 'ACTIVE';
            SELECT value FROM v$parameter WHERE name = 'sessions';

            # Check for blocking sessions:
            SELECT sid, serial#, username, blocking_session, seconds_in_wait, state, wait_class
            FROM v$session
            WHERE blocking_session IS NOT NULL;

            # Application side — check pool config:
            # Look for POOL_SIZE, MAX_CONNECTIONS, CONNECTION_TIMEOUT in app config
            ```

            ✅ **Good**: Active sessions < 80% of max sessions limit
            ❌ **Bad**: Sessions at max, or blocking sessions detected → kill blocking sessions as mitigation
            ⚡ **Decision**: If connection pool is exhausted → go to Section 5, Step 2
            """,
            """
            **Check replication lag (if applicable).**

            ```
            # MySQL replication:
            SHOW SLAVE STATUS\\G
            # Look for: Seconds_Behind_Master (>60 = bad, >300 = critical)
            # And: Slave_IO_Running: Yes, Slave_SQL_Running: Yes

            # PostgreSQL streaming replication:
            SELECT client_addr, state, sent_lsn, write_lsn, flush_lsn, replay_lsn,
              (sent_lsn - replay_lsn) AS replication_lag
            FROM pg_stat_replication;
            ```

            ✅ **Good**: Lag < 10 seconds, all replicas running
            ❌ **Bad**: Lag > 60 seconds or replica stopped → note for root cause
            ⚡ **Decision**: If the primary is lost and a replica is current → Section 5, Step 1 (failover to that replica)
            """,
            f"""
            **Check disk, CPU, and memory on the DB host ({ci}).**

            ```
            top -b -n 1 | head -20
            df -h | grep -E "(Use%|/$)"
            iostat -x 1 3
            free -h
            ```

            ✅ **Good**: CPU < 80%, Memory available > 20%, Disk < 85%, IO wait < 20%
            ❌ **Bad**: Any threshold breached → resource exhaustion is a likely contributing factor
            ⚡ **Decision**: Resource exhaustion → Section 5, Step 5 (resource remediation)
            """,
            """
            **Check recent DDL/DML changes and deployments (last 4 hours).**

            Query audit log or release tracker:
            ```
            # Oracle:
            SELECT username, timestamp, action_name, obj_name
            FROM dba_audit_trail
            WHERE timestamp > SYSDATE - (4/24)
            ORDER BY timestamp DESC;
            ```

            Check deployment pipeline for any releases in last 4 hours: [CHECK YOUR DEPLOYMENT TOOL]

            ✅ **Good**: No schema or release changes in the window
            ❌ **Bad**: A change landed shortly before detection
            ⚡ **Decision**: If a deployment occurred within 2 hours of incident detection → this is your primary hypothesis. Go to Section 5, Step 4 for rollback options.
            """,
        )
        blocks.append(
            DecisionTree(
                condition="After completing all diagnosis steps, which best describes your findings?",
                branches=[
                    DecisionBranch(
                        condition="DB nodes are offline / cluster split-brain",
                        action="Go to Section 5, Step 1: Cluster restart / failover",
                    ),
                    DecisionBranch(
                        condition="Connection pool exhausted, DB nodes healthy",
                        action="Go to Section 5, Step 2: Connection pool flush and restart app tier",
                    ),
                    DecisionBranch(
                        condition="Blocking sessions preventing progress",
                        action="Go to Section 5, Step 3: Kill blocking sessions",
                    ),
                    DecisionBranch(
                        condition="Recent deployment suspected",
                        action="Go to Section 5, Step 4: Rollback deployment",
                    ),
                    DecisionBranch(
                        condition="Disk / memory / CPU exhaustion",
                        action="Go to Section 5, Step 5: Resource remediation",
                    ),
                    DecisionBranch(
                        condition="None of the above / unclear",
                        action="Escalate: page vendor support (see Section 6) and senior DBA now",
                    ),
                ],
            )
        )
        return blocks

    def containment_steps(self, incident: Incident) -> list[ContentBlock]:
        ci = incident.affected_ci
        return steps(
            f"""
            **Option A: Failover to standby/replica (FASTEST — preferred first action).**

            ⚠️ CAB required if this is a planned-change environment.

            ```
            # Oracle Data Guard failover:
            dgmgrl sys/[PASSWORD]@{ci}
            FAILOVER TO [STANDBY_DB_NAME];

            # MySQL MHA failover:
            masterha_master_switch --conf=/etc/mha/app.conf --master_state=dead --orig_master_is_new_slave

            # AWS RDS Failover:
            aws rds failover-db-cluster --db-cluster-identifier [CLUSTER_ID]
            ```

            **Impact**: 30-60 seconds of dropped connections while clients reconnect to the new primary.
            **Rollback**: If standby is worse, re-failover back: `SWITCHOVER TO [PRIMARY_DB];`

            Monitor: Check application error rates within 5 minutes of failover.
            """,
            f"""
            **Option B: Restart connection pool (if pool exhaustion is the cause).**

            ```
            # Restart application connection pool (varies by tech stack):
            # Spring Boot:
            curl -X POST https://[APP_HOST]/actuator/loggers/com.zaxxer.hikari -d '{{"configuredLevel":"DEBUG"}}'
            # Direct kill: kill application processes and let them restart
            systemctl restart {ci}-app

            # AWS RDS Proxy (if used):
            aws rds failover-db-cluster --db-cluster-identifier [CLUSTER]
            ```

            **Impact**: In-flight requests on the restarted app nodes fail; users may need to retry.
            **Rollback**: None needed; if connection count climbs straight back to max, the pool is not the root cause.

            **Monitor**: After restart, watch connection count in DB metrics dashboard.
            """,
            """
            **Option C: Kill blocking sessions.**

            ```
            -- Oracle: Find and kill blocking sessions:
            SELECT 'ALTER SYSTEM KILL SESSION ''' || sid || ',' || serial# || ''' IMMEDIATE;'
            FROM v$session
            WHERE blocking_session IS NOT NULL;
            -- Execute the generated statements above after reviewing them

            -- MySQL: Kill blocking connections
            SELECT CONCAT('KILL ', id, ';') FROM information_schema.processlist
            WHERE time > 300 AND command != 'Sleep'
            ORDER BY time DESC LIMIT 10;
            ```

            **Impact**: Killed transactions are rolled back; long rollbacks can briefly increase load.
            **Rollback**: Irreversible. Re-run any legitimate batch job that was killed.

            ⚠️ **Review each session before killing** — some long-running transactions may be legitimate batch jobs.
            """,
            f"""
            **Option D: Rollback a recent deployment (if deployment is suspected).**

            ⚠️ CAB required in production.

            Get the last known-good deployment tag from your pipeline:
            ```
            # Kubernetes:
            kubectl rollout undo deployment/{ci} -n production
            kubectl rollout status deployment/{ci} -n production

            # AWS CodeDeploy:
            aws deploy create-deployment \\
              --application-name [APP_NAME] \\
              --deployment-group-name [GROUP] \\
              --deployment-config-name CodeDeployDefault.AllAtOnce \\
              --revision revisionType=GitHub,gitHubLocation={{repository=[REPO],commitId=[LAST_GOOD_COMMIT]}}
            ```

            **Impact**: Features shipped in the rolled-back release disappear until it is redeployed.
            **Rollback**: Redeploy the newer release once the fix is verified.
            """,
            f"""
            **Option E: Resource remediation (disk, memory or CPU exhaustion).**

            ```
            # Free disk: purge archived logs older than the retention window
            sudo find /var/log/mysql /u01/app/oracle/diag -name "*.trc" -mtime +2 -delete
            # Identify the heaviest queries before adding capacity:
            SELECT * FROM sys.statement_analysis ORDER BY total_latency DESC LIMIT 10;
            # AWS RDS — scale the instance class:
            aws rds modify-db-instance --db-instance-identifier {ci} --db-instance-class [LARGER_CLASS] --apply-immediately
            ```

            ⚠️ CAB required — an instance class change restarts the database.

            **Impact**: Instance resize causes a restart (Multi-AZ: a short failover).
            **Rollback**: Modify the instance back to the original class in the next maintenance window.
            """,
        )
