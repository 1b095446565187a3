import threading

from digitnet.utils.locks import ReadWriteLock


def test_readers_share_access():
    lock = ReadWriteLock()
    barrier = threading.Barrier(3, timeout=5)
    passed = []

    def reader():
        with lock.read():
            barrier.wait()
            passed.append(True)

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)
    assert len(passed) == 3


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    release = threading.Event()
    reading = threading.Event()
    written = threading.Event()

    def reader():
        with lock.read():
            reading.set()
            release.wait(timeout=5)

    def writer():
        with lock.write():
            written.set()

    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    reading.wait(timeout=5)
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    assert not written.wait(timeout=0.2)
    release.set()
    assert written.wait(timeout=5)
    reader_thread.join()
    writer_thread.join()


def test_nested_read_does_not_block():
    lock = ReadWriteLock()
    with lock.read():
        with lock.read():
            pass
    with lock.write():
        pass
