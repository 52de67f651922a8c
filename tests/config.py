"""
测试用配置：登录 cookie、分享短码、分享页面样例。

仅在此处维护，conftest 及各 test_*.py 均从此导入。
所有测试都通过 httpx.MockTransport / mock 完成，不访问真实的百度网盘。
"""

# ---------- 账号 ----------
PCS_BDUSS = "test-bduss"
PCS_STOKEN = "test-stoken"
PCS_BDSTOKEN = "0123456789abcdef"

# ---------- 分享 ----------
SHARE_SOURCE_ID = "AbCdEfGh"
SHARE_PWD = "x1y2"
SHARE_URL = f"https://pan.baidu.com/s/1{SHARE_SOURCE_ID}"
SHARE_URL_WITH_PWD = f"{SHARE_URL}?pwd={SHARE_PWD}"
SHARE_INIT_URL = f"https://pan.baidu.com/share/init?surl={SHARE_SOURCE_ID}"
SHARE_BDCLND = "Zk9xR2%2FQ"

SHARE_UK = 1098765432
SHARE_ID = 3344556677

# 页面中包含一个 yunData.setData 脚本，fs_id 出现三次（其中一个重复）
SHARE_PAGE_HTML = f"""<!DOCTYPE html>
<html>
<head><script>var head = 1;</script></head>
<body>
<div id="app"></div>
<script>window.foo = {{"uk":1,}};</script>
<script>
yunData.setData({{"uk":{SHARE_UK},"shareid":{SHARE_ID},"file_list":[
{{"fs_id":111,"server_filename":"a.txt"}},{{"fs_id":222,"server_filename":"b.txt"}},{{"fs_id":111,"server_filename":"a.txt"}}]}});
</script>
</body>
</html>
"""

# 两个 yunData.setData 脚本：后出现的生效
SHARE_PAGE_HTML_TWO_BLOCKS = """<html><body>
<script>yunData.setData({"uk":1,"shareid":2,"file_list":[{"fs_id":3,"isdir":0}]});</script>
<script>yunData.setData({"uk":10,"shareid":20,"file_list":[{"fs_id":30,"isdir":0}]});</script>
</body></html>
"""

# 分享已取消时的页面：没有 yunData
SHARE_PAGE_HTML_NO_DATA = """<html><body>
<div class="error">啊哦，你来晚了，分享的文件已经被取消了，下次要早点哟。</div>
<script>var a = 1;</script>
</body></html>
"""
