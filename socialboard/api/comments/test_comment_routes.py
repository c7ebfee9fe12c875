# socialboard/api/comments/test_comment_routes.py
"""
댓글 API 테스트 (작성 / 답글 / 트리 조회 / 삭제 / 투표)
"""

import pytest

from socialboard.services.firestore_service import comments_ref


@pytest.fixture
def post_id(client, sign_in):
    headers = sign_in('author', 'Author')
    response = client.post('/api/posts', json={'content': '댓글 테스트용 글'}, headers=headers)
    return response.get_json()['post_id']


def _comment(client, headers, post_id, content, parent=None):
    payload = {'content': content}
    if parent:
        payload['parent_comment_id'] = parent
    response = client.post(f"/api/posts/{post_id}/comments", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_create_comment_and_reply(client, sign_in, post_id):
    headers = sign_in('u1', 'Alice')

    root = _comment(client, headers, post_id, '첫 댓글')
    reply = _comment(client, headers, post_id, '답글', parent=root['comment_id'])

    assert root['parent_comment_id'] is None
    assert root['author_name'] == 'Alice'
    assert reply['parent_comment_id'] == root['comment_id']


def test_comment_tree(client, sign_in, post_id):
    headers = sign_in('u1')
    first = _comment(client, headers, post_id, 'A')
    _comment(client, headers, post_id, 'A-1', parent=first['comment_id'])
    second = _comment(client, headers, post_id, 'B')

    response = client.get(f"/api/posts/{post_id}/comments")

    assert response.status_code == 200
    forest = response.get_json()['comments']
    assert [node['comment_id'] for node in forest] == [first['comment_id'], second['comment_id']]
    assert [reply['content'] for reply in forest[0]['replies']] == ['A-1']
    assert forest[1]['replies'] == []


def test_reply_to_reply_joins_root_thread(client, sign_in, post_id):
    headers = sign_in('u1')
    root = _comment(client, headers, post_id, 'root')
    reply = _comment(client, headers, post_id, 'reply', parent=root['comment_id'])

    nested = _comment(client, headers, post_id, 'nested', parent=reply['comment_id'])

    assert nested['parent_comment_id'] == root['comment_id']
    forest = client.get(f"/api/posts/{post_id}/comments").get_json()['comments']
    assert [r['content'] for r in forest[0]['replies']] == ['reply', 'nested']


def test_comment_validation_and_missing_targets(client, sign_in, post_id):
    headers = sign_in('u1')

    blank = client.post(f"/api/posts/{post_id}/comments", json={'content': '  '}, headers=headers)
    assert blank.status_code == 400

    too_long = client.post(f"/api/posts/{post_id}/comments", json={'content': 'x' * 1001}, headers=headers)
    assert too_long.status_code == 400

    no_post = client.post('/api/posts/missing/comments', json={'content': 'hi'}, headers=headers)
    assert no_post.status_code == 404

    no_parent = client.post(f"/api/posts/{post_id}/comments",
                            json={'content': 'hi', 'parent_comment_id': 'missing'}, headers=headers)
    assert no_parent.status_code == 404

    assert client.get('/api/posts/missing/comments').status_code == 404


def test_delete_comment_removes_replies(client, sign_in, post_id):
    alice = sign_in('alice')
    bob = sign_in('bob')
    root = _comment(client, alice, post_id, 'root')
    _comment(client, bob, post_id, 'reply', parent=root['comment_id'])
    other = _comment(client, bob, post_id, 'other')

    forbidden = client.delete(f"/api/posts/{post_id}/comments/{root['comment_id']}", headers=bob)
    assert forbidden.status_code == 403

    deleted = client.delete(f"/api/posts/{post_id}/comments/{root['comment_id']}", headers=alice)
    assert deleted.status_code == 204

    forest = client.get(f"/api/posts/{post_id}/comments").get_json()['comments']
    assert [node['comment_id'] for node in forest] == [other['comment_id']]

    missing = client.delete(f"/api/posts/{post_id}/comments/{root['comment_id']}", headers=alice)
    assert missing.status_code == 404


def test_vote_on_comment(client, sign_in, post_id):
    alice = sign_in('alice')
    bob = sign_in('bob')
    comment = _comment(client, alice, post_id, 'vote me')
    url = f"/api/posts/{post_id}/comments/{comment['comment_id']}/vote"

    client.post(url, json={'vote_type': 'like'}, headers=alice)
    result = client.post(url, json={'vote_type': 'dislike'}, headers=bob).get_json()

    assert (result['likes'], result['dislikes'], result['my_vote']) == (1, 1, 'dislike')

    forest = client.get(f"/api/posts/{post_id}/comments", headers=alice).get_json()['comments']
    assert forest[0]['my_vote'] == 'like'
    assert forest[0]['likes'] == 1

    missing = client.post(f"/api/posts/{post_id}/comments/missing/vote", json={'vote_type': 'like'}, headers=bob)
    assert missing.status_code == 404


def test_reply_into_thread_without_root_is_rejected(client, sign_in, post_id, fake_db):
    """원 댓글이 사라진 답글에 다시 답글을 달면 보이지 않는 댓글이 생기므로 거부"""
    headers = sign_in('u1')
    comments_ref(fake_db, 'test-app', post_id).document('orphan').set({
        'user_id': 'u2', 'author_name': 'Bob', 'content': 'left behind', 'parent_comment_id': 'gone'
    })

    response = client.post(f"/api/posts/{post_id}/comments",
                           json={'content': 'hello?', 'parent_comment_id': 'orphan'}, headers=headers)

    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'RESOURCE_NOT_FOUND'
    stored = [doc.id for doc in comments_ref(fake_db, 'test-app', post_id).stream()]
    assert stored == ['orphan']
