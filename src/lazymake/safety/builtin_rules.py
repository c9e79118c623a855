"""Built-in catalog of dangerous command rules.

The catalog is an immutable tuple passed explicitly to the Checker, so tests
and callers can supply their own rule sets. New rules are appended.

Choosing a severity:
    - CRITICAL: irreversible system-wide damage (data loss, destroyed infrastructure)
    - WARNING: reversible or project-scoped disruption (rebuild, restore from git)
    - INFO: informational only

Patterns should be specific: ``rm\\s+-rf\\s+/[^/]`` rather than ``rm``.
"""

from lazymake.safety.rules import Rule, Severity

BUILTIN_RULES: tuple[Rule, ...] = (
    # ========== CRITICAL: System-wide destructive operations ==========
    Rule(
        id="rm-rf-root",
        severity=Severity.CRITICAL,
        patterns=(
            r"rm\s+(-\w*f\w*\s+){1,2}/[^/\s]",  # rm -rf /anything
            r"rm\s+(-\w*f\w*\s+){1,2}\$HOME",
            r"sudo\s+rm\s+-\w*rf",
            r"rm\s+(-\w*f\w*\s+){1,2}~",
            r"rm\s+(-\w*f\w*\s+){1,2}\*",
        ),
        description=(
            "Removes files with root privileges or system-wide paths. This can "
            "permanently delete critical system files or all user data."
        ),
        suggestion=(
            "Use specific paths instead of wildcards or root directories. "
            "Double-check paths before execution."
        ),
    ),
    Rule(
        id="disk-wipe",
        severity=Severity.CRITICAL,
        patterns=(
            r"dd\s+.*of=/dev/(sd|hd|nvme)",
            r"mkfs\.\w+\s+/dev/",
            r"fdisk.*-w",
            r"parted.*-s",
        ),
        description=(
            "Formats disks or writes to block devices. This will erase all data "
            "on the target device."
        ),
        suggestion=(
            "Triple-check device paths. Use 'lsblk' to verify the correct device. "
            "Consider backing up first."
        ),
    ),
    Rule(
        id="database-drop",
        severity=Severity.CRITICAL,
        patterns=(
            r"(?i)drop\s+database",
            r"(?i)truncate\s+table",
            r"(?i)delete\s+from.*where\s+(1=1|true)",
            r"psql.*-c.*drop",
            r"mysql.*-e.*drop",
            r"mongo.*dropDatabase",
        ),
        description="Drops databases or truncates tables. This causes permanent data loss.",
        suggestion=(
            "Always back up before destructive database operations. Verify the "
            "database name (production vs dev)."
        ),
    ),
    Rule(
        id="git-force-push",
        severity=Severity.CRITICAL,
        patterns=(
            r"git\s+push.*\s+-f(\s|$)",
            r"git\s+push.*\s+--force(\s|$)",
        ),
        description=(
            "Force pushes to a git repository, potentially overwriting others' "
            "work and losing history."
        ),
        suggestion=(
            "Coordinate with the team before force pushing. Use --force-with-lease "
            "as a safer alternative. Verify the branch name."
        ),
    ),
    Rule(
        id="terraform-destroy",
        severity=Severity.CRITICAL,
        patterns=(
            r"terraform\s+destroy",
            r"terraform\s+apply.*-destroy",
            r"tofu\s+destroy",
        ),
        description=(
            "Destroys Terraform-managed infrastructure. This will tear down all "
            "resources (VMs, databases, networks, etc)."
        ),
        suggestion=(
            "Run 'terraform plan -destroy' first to review changes. Verify the "
            "workspace/environment. Consider -target for specific resources."
        ),
    ),
    Rule(
        id="kubectl-delete",
        severity=Severity.CRITICAL,
        patterns=(
            r"kubectl\s+delete\s+(namespace|ns)",
            r"kubectl\s+delete\s+(pvc|pv)",
            r"kubectl\s+delete.*--all",
            r"kubectl\s+delete.*-A",
            r"kubectl\s+delete.*--all-namespaces",
        ),
        description=(
            "Deletes Kubernetes resources, namespaces, or persistent volumes. "
            "Data in PVs will be lost."
        ),
        suggestion=(
            "Use 'kubectl get' first to verify resources. Check the current "
            "context with 'kubectl config current-context'."
        ),
    ),
    # ========== WARNING: Project-level destructive operations ==========
    Rule(
        id="docker-system-prune",
        severity=Severity.WARNING,
        patterns=(
            r"docker\s+system\s+prune",
            r"docker\s+volume\s+(prune|rm).*-f",
            r"docker\s+image\s+prune.*-a",
            r"docker\s+container\s+prune",
        ),
        description=(
            "Removes Docker volumes, images, or containers. May delete data or "
            "require lengthy rebuilds."
        ),
        suggestion=(
            "Use specific container/volume names instead of prune. Consider the "
            "impact on local development."
        ),
    ),
    Rule(
        id="git-reset-hard",
        severity=Severity.WARNING,
        patterns=(
            r"git\s+reset\s+--hard",
            r"git\s+clean\s+-\w*fd",
        ),
        description="Discards uncommitted changes permanently. Untracked files will be deleted.",
        suggestion=(
            "Stash changes with 'git stash' for recovery. Review changes with "
            "'git status' and 'git diff' first."
        ),
    ),
    Rule(
        id="npm-uninstall-all",
        severity=Severity.WARNING,
        patterns=(
            r"rm\s+-\w*rf\w*\s+node_modules",
            r"npm\s+uninstall.*-g",
            r"pnpm\s+uninstall.*-g",
            r"yarn\s+global\s+remove",
        ),
        description="Removes all Node.js dependencies or global packages. Requires reinstall.",
        suggestion="Use 'npm ci' or 'pnpm install --frozen-lockfile' to reinstall from the lock file.",
    ),
    Rule(
        id="package-remove",
        severity=Severity.WARNING,
        patterns=(
            r"apt(-get)?\s+remove",
            r"yum\s+remove",
            r"dnf\s+remove",
            r"brew\s+uninstall",
            r"pacman\s+-R",
        ),
        description="Removes system packages. May break system dependencies.",
        suggestion=(
            "Verify package names before removal. Consider the package manager's "
            "simulation mode first."
        ),
    ),
    Rule(
        id="chmod-777",
        severity=Severity.WARNING,
        patterns=(
            r"chmod\s+(-R\s+)?777",
            r"chmod\s+(-R\s+)?a\+rwx",
        ),
        description="Sets overly permissive file permissions (777 = world-writable). Security risk.",
        suggestion="Use more restrictive permissions. Typically 755 for executables, 644 for files.",
    ),
    # ========== CRITICAL: Cloud provider operations ==========
    Rule(
        id="aws-destructive",
        severity=Severity.CRITICAL,
        patterns=(
            r"aws\s+cloudformation\s+delete-stack",
            r"aws\s+s3\s+rb\s+.*--force",
            r"aws\s+s3\s+rm\s+.*--recursive",
            r"aws\s+ec2\s+terminate-instances",
            r"aws\s+rds\s+delete-db-instance",
            r"aws\s+rds\s+delete-db-cluster",
        ),
        description=(
            "Deletes AWS resources (CloudFormation stacks, S3 buckets, EC2 "
            "instances, RDS databases). This destroys cloud infrastructure and "
            "data permanently."
        ),
        suggestion=(
            "Verify the AWS profile and region. Review resources with 'aws "
            "cloudformation describe-stacks' or 'aws s3 ls' first. Enable "
            "deletion protection for critical resources."
        ),
    ),
    Rule(
        id="gcp-destructive",
        severity=Severity.CRITICAL,
        patterns=(
            r"gcloud\s+projects\s+delete",
            r"gcloud\s+compute\s+instances\s+delete",
            r"gcloud\s+sql\s+instances\s+delete",
            r"gsutil\s+rb",
            r"gsutil\s+rm\s+.*-r",
        ),
        description=(
            "Deletes GCP resources (projects, instances, Cloud SQL, GCS buckets). "
            "This destroys cloud infrastructure and data."
        ),
        suggestion=(
            "Verify the GCP project with 'gcloud config list'. Review resources "
            "with 'gcloud compute instances list' first."
        ),
    ),
    Rule(
        id="azure-destructive",
        severity=Severity.CRITICAL,
        patterns=(
            r"az\s+group\s+delete",
            r"az\s+vm\s+delete",
            r"az\s+sql\s+server\s+delete",
            r"az\s+storage\s+account\s+delete",
        ),
        description=(
            "Deletes Azure resources (resource groups, VMs, SQL servers, storage "
            "accounts). This destroys cloud infrastructure."
        ),
        suggestion=(
            "Verify the subscription with 'az account show'. Review resources "
            "with 'az group list' first."
        ),
    ),
    Rule(
        id="heroku-destructive",
        severity=Severity.CRITICAL,
        patterns=(
            r"heroku\s+apps:destroy",
            r"heroku\s+addons:destroy",
            r"heroku\s+pg:reset",
        ),
        description=(
            "Destroys Heroku applications, addons, or resets databases. This "
            "causes permanent data loss."
        ),
        suggestion=(
            "Verify the app name with 'heroku apps'. Create a backup with "
            "'heroku pg:backups:capture' first."
        ),
    ),
    # ========== CRITICAL: Additional database operations ==========
    Rule(
        id="redis-flush",
        severity=Severity.CRITICAL,
        patterns=(
            r"redis-cli\s+.*FLUSHALL",
            r"redis-cli\s+.*FLUSHDB",
            r"redis-cli\s+.*flushall",
            r"redis-cli\s+.*flushdb",
        ),
        description=(
            "Flushes data from Redis (FLUSHALL clears all databases, FLUSHDB the "
            "current one). Data loss is immediate and unrecoverable."
        ),
        suggestion=(
            "Verify the instance with 'redis-cli INFO'. Prefer SCAN and DEL for "
            "targeted deletion. Back up with BGSAVE first."
        ),
    ),
    Rule(
        id="cassandra-drop",
        severity=Severity.CRITICAL,
        patterns=(
            r"(?i)cqlsh.*DROP\s+KEYSPACE",
            r"(?i)cqlsh.*DROP\s+TABLE",
            r"(?i)nodetool\s+clearsnapshot",
        ),
        description=(
            "Drops Cassandra keyspaces or tables, or clears snapshots. This "
            "causes permanent data loss."
        ),
        suggestion=(
            "Verify the keyspace with 'DESCRIBE KEYSPACES'. Create a snapshot "
            "with 'nodetool snapshot' first."
        ),
    ),
    # ========== CRITICAL: System operations ==========
    Rule(
        id="crontab-remove",
        severity=Severity.CRITICAL,
        patterns=(
            r"crontab\s+-r",
            r"crontab\s+-ri",
        ),
        description="Removes all cron jobs for the current user. Scheduled tasks will stop running.",
        suggestion=(
            "Back up with 'crontab -l > crontab.backup' first. Use 'crontab -e' "
            "to edit specific jobs."
        ),
    ),
    Rule(
        id="iptables-flush",
        severity=Severity.CRITICAL,
        patterns=(
            r"iptables\s+-F",
            r"iptables\s+--flush",
            r"ip6tables\s+-F",
            r"nft\s+flush\s+ruleset",
        ),
        description=(
            "Flushes all firewall rules. This may expose services to the network "
            "or lock you out of remote servers."
        ),
        suggestion=(
            "Save rules with 'iptables-save > rules.backup' first. Test changes "
            "in a staging environment."
        ),
    ),
    # ========== WARNING: Version control destructive operations ==========
    Rule(
        id="git-branch-delete-force",
        severity=Severity.WARNING,
        patterns=(
            r"git\s+branch\s+-D",
            r"git\s+branch\s+--delete\s+--force",
        ),
        description=(
            "Force deletes a git branch regardless of merge status. Unmerged "
            "commits may be lost."
        ),
        suggestion=(
            "Use 'git branch -d' for a deletion that checks merge status. Verify "
            "the branch with 'git log' first."
        ),
    ),
    Rule(
        id="git-reflog-expire",
        severity=Severity.WARNING,
        patterns=(
            r"git\s+reflog\s+expire",
            r"git\s+gc\s+--prune=now",
        ),
        description=(
            "Expires reflog entries or prunes objects immediately. This removes "
            "the ability to recover from mistakes."
        ),
        suggestion="Use the default 'git gc', which keeps recent history.",
    ),
    # ========== WARNING: Container orchestration ==========
    Rule(
        id="docker-swarm-destructive",
        severity=Severity.WARNING,
        patterns=(
            r"docker\s+stack\s+rm",
            r"docker\s+swarm\s+leave\s+--force",
            r"docker\s+service\s+rm",
        ),
        description=(
            "Removes Docker swarm stacks or services, or leaves the swarm. "
            "Running services will be stopped."
        ),
        suggestion="Review running services with 'docker stack services'. Scale down gradually if possible.",
    ),
    Rule(
        id="podman-system-reset",
        severity=Severity.WARNING,
        patterns=(
            r"podman\s+system\s+reset",
            r"podman\s+volume\s+prune\s+-f",
        ),
        description=(
            "Resets all Podman data or removes unused volumes. Containers, images "
            "and volumes may be deleted."
        ),
        suggestion="Review resources with 'podman ps -a' and 'podman volume ls' first.",
    ),
    # ========== WARNING: Package managers ==========
    Rule(
        id="pip-uninstall-all",
        severity=Severity.WARNING,
        patterns=(
            r"pip\s+uninstall\s+.*-y",
            r"pip3\s+uninstall\s+.*-y",
            r"pip\s+freeze.*xargs.*pip\s+uninstall",
        ),
        description="Uninstalls Python packages without confirmation. May break Python environments.",
        suggestion="Use virtual environments. Review packages with 'pip list' first.",
    ),
    Rule(
        id="go-clean-modcache",
        severity=Severity.WARNING,
        patterns=(
            r"go\s+clean\s+-modcache",
            r"go\s+clean\s+.*-cache.*-modcache",
        ),
        description=(
            "Removes all downloaded Go modules from the cache. Requires "
            "re-downloading on the next build."
        ),
        suggestion="Use 'go clean -cache' to clear only the build cache.",
    ),
    # ========== WARNING: Critical service operations ==========
    Rule(
        id="systemctl-critical-services",
        severity=Severity.WARNING,
        patterns=(
            r"systemctl\s+(stop|disable)\s+"
            r"(nginx|apache2|httpd|postgresql|mysql|mariadb|docker|kubelet|sshd)",
            r"service\s+(nginx|apache2|httpd|postgresql|mysql|mariadb|docker|sshd)\s+stop",
        ),
        description=(
            "Stops or disables critical system services. May cause downtime or "
            "lock you out of servers."
        ),
        suggestion="Check state with 'systemctl status'. Use 'systemctl reload' for config changes.",
    ),
    Rule(
        id="killall-force",
        severity=Severity.WARNING,
        patterns=(
            r"killall\s+-9",
            r"killall\s+--signal\s+KILL",
            r"pkill\s+-9",
        ),
        description=(
            "Force kills all processes by name. Processes get no chance to clean "
            "up, which may corrupt data."
        ),
        suggestion="Try 'killall' without -9 first. Check processes with 'pgrep' before killing.",
    ),
    Rule(
        id="deployment-commands",
        severity=Severity.WARNING,
        patterns=(
            r"kubectl\s+apply",
            r"terraform\s+apply",
            r"tofu\s+apply",
            r"helm\s+install",
            r"helm\s+upgrade",
        ),
        description="Deploys or applies infrastructure changes. May affect running systems.",
        suggestion=(
            "Review changes with plan/diff first. Verify the target environment. "
            "Consider staging before production."
        ),
    ),
)


def get_builtin_rule(rule_id: str) -> Rule | None:
    """Return the built-in rule with the given ID, or None if there is none."""
    for rule in BUILTIN_RULES:
        if rule.id == rule_id:
            return rule
    return None
