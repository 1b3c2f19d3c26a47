# gitbuilder

Building blocks for a push-to-deploy git builder. A user pushes an
application over SSH; the builder hands the push to `git-shell` with a
pre-receive hook, reads the ref updates, decides whether the tree is a
buildpack (Procfile) or Dockerfile build, knows where the build's objects
live in object storage and removes what is left of applications that no
longer exist.

## What is inside

- `gitbuilder.sha`: validated git SHAs (`new_sha`, `Sha` with `full` and
  `short`, `InvalidGitSha`).
- `gitbuilder.circuit`: a thread-safe `Circuit` with `state()`, `open()` and
  `close()`, created in the `CircuitState.OPEN` state; used to report whether
  the SSH server is up.
- `gitbuilder.lock`: `InMemoryRepositoryLock` and `wrap_in_lock`, which keep
  two operations on the same repository from running at once. `wrap_in_lock`
  raises `AlreadyLockedError` if the lock is held and `LockTimeoutError` if
  the wrapped function outlasts the lock's timeout.
- `gitbuilder.sshd_config`: `ServerConfig.from_env()` reads the SSH server's
  settings from environment variables, with defaults such as port 2223 and a
  10 minute lock timeout.
- `gitbuilder.receive_config`: `ReceiveConfig.from_env()` reads the
  git-receive settings; `app()` derives the application name from the
  repository and `check_durations()` resets tick intervals that are too small
  or not below their wait.
- `gitbuilder.sshd`: SSH-side helpers: `clean_repo_name`, `clean_exec`,
  `fingerprint`, `ssh_connection`, `git_pkt_line` and `ping`.
- `gitbuilder.git`: `create_repo` (a bare repository), `create_pre_receive_hook`
  and `render_pre_receive_hook`, and `receive`, which runs `git-shell` and
  relays its output to the client channel.
- `gitbuilder.receive`: parsing the `old new ref` lines a pre-receive hook
  reads (`read_line`, `iter_ref_updates`, `RefUpdate`).
- `gitbuilder.build_type`: `get_build_type` and `BuildType`.
- `gitbuilder.build`: `repo_cmd` and `run` for commands run in a repository,
  `build_builder_pod_node_selector`, `pretty_print_json` and `get_proc_file`.
- `gitbuilder.slug_builder_info`: `SlugBuilderInfo`, the object-storage keys
  for an app's tarball, slug, Procfile and cache.
- `gitbuilder.pull_policy`: `PullPolicy` and `pull_policy_from_string`.
- `gitbuilder.storage`: `object_exists` and `wait_for_object`, plus
  `FakeObjectStatter`, `FakeObjectGetter` and `PathNotFoundError`.
- `gitbuilder.k8s_fakes`: `FakeSecret` and `FakeSecretsNamespacer`, in-memory
  secrets clients for tests.
- `gitbuilder.cleaner`: `run` and its helpers, which remove local
  repositories and stored objects of deleted applications.
- `gitbuilder.health`: `healthz` and the WSGI application from
  `make_healthz_app`, serving `/healthz`.
- `gitbuilder.env` and `gitbuilder.fs`: real and in-memory environment and
  file-system access (`RealEnv`, `FakeEnv`, `RealFS`, `FakeFS`).
- `gitbuilder.conf`: `get_builder_key` and `get_storage_params`.

## Examples

Validate the revision a push delivered:

```python
from gitbuilder.sha import new_sha, InvalidGitSha

try:
    sha = new_sha("71a09fbed590558ff822536584fc77248f070384")
    print(sha.short)   # "71a09fbe"
except InvalidGitSha as exc:
    print(exc)
```

Normalise the repository named in an SSH exec request:

```python
from gitbuilder.sshd import clean_repo_name

clean_repo_name("'/myapp.git'")   # "myapp"
```

Names containing `..` and empty names raise `RepoNameError`.

Parse a node selector:

```python
from gitbuilder.build import build_builder_pod_node_selector

build_builder_pod_node_selector("pool:worker, network:fast")
# {"pool": "worker", "network": "fast"}
```

Check an image pull policy from configuration:

```python
from gitbuilder.pull_policy import pull_policy_from_string

policy = pull_policy_from_string("IfNotPresent")
```

Anything other than `Always`, `IfNotPresent` or `Never` raises
`InvalidPullPolicy`.

Decide how an unpacked tree is built:

```python
from gitbuilder.build_type import get_build_type

build_type = get_build_type("/tmp/checkout", {"HEPHY_BUILDER": "dockerfile"})
```

A tree with only a Dockerfile is a Dockerfile build, one with a Procfile or
with neither is a buildpack build, and when both files are present a valid
`HEPHY_BUILDER` setting chooses, falling back to a buildpack build.

Run a locked operation on a repository:

```python
from gitbuilder.lock import InMemoryRepositoryLock, wrap_in_lock

lock = InMemoryRepositoryLock(timeout=600)
result = wrap_in_lock(lock, "myapp", lambda: "done")
```

## What it does not do

This package has no command-line entry point and no SSH server loop: the
`gitbuilder.sshd` module offers only the helpers listed above. It does not
describe, create or watch build pods, does not talk to a controller or to a
Kubernetes cluster, and includes no object-storage driver; the cleaner and
storage helpers take any object with the methods they call. The health module
serves `/healthz` only.