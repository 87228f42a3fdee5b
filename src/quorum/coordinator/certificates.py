"""
Restore Certificate Distribution

Restore certificates (cluster CA and node identity) are installed on every
etcd host by a fixed pool of worker threads draining a shared host queue.
A failing host does not stop the other workers: every host is attempted and
all failures are reported together.
"""

import logging
import threading
from queue import Empty, Queue
from typing import Dict, List, Sequence

from quorum.core.hosts import Host
from quorum.errors import ErrorList
from quorum.identity.certificates import CertificatePKI, restore_certificate_set

logger = logging.getLogger(__name__)

WORKER_THREADS = 50


def _host_queue(hosts: Sequence[Host]) -> "Queue[Host]":
    queue: "Queue[Host]" = Queue()
    for host in hosts:
        queue.put(host)
    return queue


def _deploy_worker(
    queue: "Queue[Host]",
    certs: Dict[str, CertificatePKI],
    image: str,
    errors: List[Exception],
) -> None:
    """Install certs on hosts from the queue until it is empty."""
    while True:
        try:
            host = queue.get_nowait()
        except Empty:
            return
        try:
            host.runtime.deploy_certificates(image, certs)
            logger.debug(f"Deployed restore certificates on host [{host.address}]")
        except Exception as e:
            logger.warning(f"failed to deploy restore certificates on host [{host.address}]: {e}")
            errors.append(e)
        finally:
            queue.task_done()


def deploy_restore_certs(
    hosts: Sequence[Host],
    cluster_certs: Dict[str, CertificatePKI],
    image: str,
) -> Dict[str, CertificatePKI]:
    """
    Install the restore certificate set on every host.

    Args:
        hosts: etcd hosts
        cluster_certs: Full cluster certificate bundle
        image: Certificate downloader image

    Returns:
        The certificate set that was deployed

    Raises:
        ErrorList: One entry per host that failed
    """
    restore_certs = restore_certificate_set(cluster_certs)
    queue = _host_queue(hosts)

    worker_errors: List[List[Exception]] = [[] for _ in range(WORKER_THREADS)]
    workers = [
        threading.Thread(
            target=_deploy_worker,
            args=(queue, restore_certs, image, worker_errors[i]),
            daemon=True,
            name=f"RestoreCerts-Worker-{i}",
        )
        for i in range(WORKER_THREADS)
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    errors = [e for errs in worker_errors for e in errs]
    if errors:
        raise ErrorList(errors, message="failed to deploy restore certificates")

    logger.info(f"Deployed restore certificates {sorted(restore_certs)} on {len(hosts)} hosts")
    return restore_certs
